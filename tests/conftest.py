"""Fake transport pieces shared by the tests (no network is ever used)."""

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from web_retrieval.core.config import RetrievalConfig
from web_retrieval.core.interfaces import BaseTransport
from web_retrieval.core.retrieval.retriever import Retriever


class DummyResponse:
    """Mimics the parts of `requests.Response` the retrieval core uses."""

    def __init__(
        self,
        body: bytes = b"",
        url: str = "https://example.org/",
        headers: dict | None = None,
        status_code: int = 200,
        fail_after: int | None = None,
        close_error: Exception | None = None,
    ):
        self.body = body
        self.url = url
        self.headers = CaseInsensitiveDict(headers or {})
        self.status_code = status_code
        self.fail_after = fail_after
        self.close_error = close_error
        self.read_calls = 0
        self.chunk_sizes: list[int] = []
        self.close_calls = 0

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def iter_content(self, chunk_size=1):
        self.chunk_sizes.append(chunk_size)
        for start in range(0, len(self.body), chunk_size):
            self.read_calls += 1
            if self.fail_after is not None and start >= self.fail_after:
                raise requests.exceptions.ChunkedEncodingError("connection broken")
            yield self.body[start : start + chunk_size]

    def close(self):
        self.close_calls += 1
        if self.close_error is not None:
            raise self.close_error


class DummyFetcher(BaseTransport):
    """Plays back `outcomes` (responses or exceptions), repeating the last one."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls: list[str] = []
        self.close_calls = 0

    def stream_get(self, url, headers=None, **kwargs):
        self.calls.append(url)
        outcome = self.outcomes[min(len(self.calls), len(self.outcomes)) - 1]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def close(self):
        self.close_calls += 1

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def make_retriever(sleeps):
    def _make(*outcomes, config: RetrievalConfig | None = None):
        fetcher = DummyFetcher(*outcomes)
        return Retriever(fetcher=fetcher, config=config, sleep=sleeps.append), fetcher

    return _make
