"""Retrieval engine: bounded retry, redirect capture and streamed bodies.

`Retriever` issues a request through a transport (a `Fetcher` by default),
retries the request phase with a fixed delay, records the address the
transport finally contacted, and streams the body in fixed-size chunks into
an in-memory buffer or a file.

Only the request phase is retried. Once the headers arrived, a failure
while reading the body surfaces as `StreamReadError` right away.
"""

from __future__ import annotations

import io
import logging
import time
from pathlib import Path
from typing import BinaryIO, Callable, Optional, Tuple, Union

from web_retrieval.core.config import RetrievalConfig
from web_retrieval.core.errors import OversizedResource, StreamReadError
from web_retrieval.core.interfaces import BaseTransport
from web_retrieval.core.locator import Locator, LocatorLike, as_locator
from web_retrieval.core.retrieval.charset import (
    DEFAULT_ENCODING,
    decode_provisional,
    resolve_charset,
)
from web_retrieval.core.retrieval.fetcher import Fetcher
from web_retrieval.core.retrieval.redirect import resolve_final_locator
from web_retrieval.core.retrieval.session import released, request_with_retry

logger = logging.getLogger(__name__)


class Retriever:
    """Fetch HTTP(S) resources as bytes, text or files.

    Every operation returns (or is) the `Locator` of the address actually
    served, which differs from the input when the server redirected.
    A `Fetcher` built by the retriever itself is closed by `close()` or on
    leaving a `with` block; an injected transport stays the caller's.

    Usage:
        with Retriever() as r:
            text, served = r.fetch_text(Locator("https://example.org"), detect_encoding=True)
    """

    def __init__(
        self,
        fetcher: Optional[BaseTransport] = None,
        config: Optional[RetrievalConfig] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config or RetrievalConfig()
        self._owns_fetcher = fetcher is None
        self.fetcher = fetcher or Fetcher(
            timeout=self.config.timeout, ua_pool=self.config.user_agents
        )
        self.sleep = sleep

    def close(self) -> None:
        if self._owns_fetcher:
            self.fetcher.close()

    def __enter__(self) -> "Retriever":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def fetch_bytes(self, locator: LocatorLike) -> Tuple[bytes, Locator]:
        """Download the whole body into memory."""
        buffer = io.BytesIO()
        resolved = self._load(as_locator(locator), buffer)
        return buffer.getvalue(), resolved

    def fetch_text(
        self,
        locator: LocatorLike,
        encoding: Optional[str] = None,
        detect_encoding: bool = False,
    ) -> Tuple[str, Locator]:
        """Download the body and decode it.

        An explicit `encoding` wins. Otherwise, with `detect_encoding`, the
        charset declared in the content is used (ASCII when none is found);
        without it the body is decoded as ASCII.
        """
        data, resolved = self.fetch_bytes(locator)
        if encoding is None:
            if detect_encoding:
                encoding = resolve_charset(decode_provisional(data)) or DEFAULT_ENCODING
            else:
                encoding = DEFAULT_ENCODING
        return data.decode(encoding, errors="replace"), resolved

    def fetch_to_file(self, locator: LocatorLike, path: Union[str, Path]) -> Locator:
        """Stream the body to `path`, overwriting any existing file.

        The file is only created once a request attempt succeeded. If reading
        the body fails midway the partial file is left in place.
        """
        loc = as_locator(locator)
        response = request_with_retry(self.fetcher, loc, self.config, self.sleep)
        with released(response):
            self._check_size(loc, response)
            with open(path, "wb") as fh:
                size = self._stream(loc, response, fh)
        resolved = Locator(response.url)
        logger.info("Saved %s to %s (%d bytes)", resolved.address, path, size)
        return resolved

    def resolve_final_locator(self, locator: LocatorLike) -> Locator:
        """Return the locator the server finally answers from, body unread."""
        return resolve_final_locator(locator, self.fetcher, self.config, self.sleep)

    def _load(self, locator: Locator, sink: BinaryIO) -> Locator:
        response = request_with_retry(self.fetcher, locator, self.config, self.sleep)
        with released(response):
            self._check_size(locator, response)
            size = self._stream(locator, response, sink)
        resolved = Locator(response.url)
        logger.info("Fetched %s (%d bytes)", resolved.address, size)
        return resolved

    def _check_size(self, locator: Locator, response) -> None:
        declared = response.headers.get("Content-Length")
        if declared is None:
            return
        try:
            length = int(declared)
        except ValueError:
            logger.warning(
                "Ignoring invalid Content-Length %r for %s", declared, locator.address
            )
            return
        if length > self.config.max_content_length:
            raise OversizedResource(
                locator.address, length, self.config.max_content_length
            )

    def _stream(self, locator: Locator, response, sink: BinaryIO) -> int:
        # only read errors become StreamReadError, sink errors propagate as is
        chunks = iter(response.iter_content(chunk_size=self.config.chunk_size))
        total = 0
        while True:
            try:
                chunk = next(chunks)
            except StopIteration:
                break
            except OSError as exc:
                raise StreamReadError(locator.address, str(exc)) from exc
            if not chunk:
                continue
            sink.write(chunk)
            total += len(chunk)
        return total
