"""HTTP transport with timeout and optional UA rotation.

Provides a small `Fetcher` object exposing `stream_get`. Retries
are left to the caller (see `Retriever`), so the adapter does not retry on
its own unless asked to.
"""

from __future__ import annotations

import random
from typing import Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from web_retrieval.core.interfaces import BaseTransport

DEFAULT_UA_POOL = [
    "Mozilla/5.0 (compatible; WebRetrievalBot/1.0; +https://example.org/bot)",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
]


class Fetcher(BaseTransport):
    """Small HTTP client following redirects, with per-request timeout.

    Usage:
        f = Fetcher(timeout=15)
        resp = f.stream_get(url)
        resp.url  # address served after redirects
    """

    def __init__(
        self,
        timeout: float = 15,
        retries: int = 0,
        backoff_factor: float = 0.3,
        ua_pool: Optional[list[str]] = None,
    ) -> None:
        self.timeout = timeout
        self.session = requests.Session()
        retry = Retry(
            total=retries,
            allowed_methods=frozenset(["GET", "HEAD"]),
            backoff_factor=backoff_factor,
        )
        adapter = HTTPAdapter(max_retries=retry)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)
        self.ua_pool = ua_pool or DEFAULT_UA_POOL

    def _headers(self, headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        base = {"User-Agent": random.choice(self.ua_pool)}
        if headers:
            base.update(headers)
        return base

    def stream_get(self, url: str, headers: Optional[Dict[str, str]] = None, **kwargs):
        # body stays on the socket until iter_content() or close()
        return self.session.get(
            url,
            headers=self._headers(headers),
            timeout=self.timeout,
            stream=True,
            **kwargs,
        )

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
