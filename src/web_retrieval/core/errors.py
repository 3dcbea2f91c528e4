"""Exceptions raised by the retrieval core.

Callers can catch `RetrievalError` for any failure of a retrieval call, or a
subclass when they need to tell a bad address from an exhausted retry budget.
"""

from __future__ import annotations

from typing import List, Optional

__all__ = [
    "RetrievalError",
    "InvalidAddress",
    "OversizedResource",
    "RetrievalExhausted",
    "StreamReadError",
]


class RetrievalError(RuntimeError):
    """Base exception for every retrieval failure."""


class InvalidAddress(RetrievalError, ValueError):
    """Raised when a locator is built from a non HTTP(S) address."""

    def __init__(self, address: object) -> None:
        super().__init__(
            f"The address must begin with 'http://' or 'https://': {address!r}"
        )
        self.address = address


class OversizedResource(RetrievalError):
    """Raised when the declared content length is above the supported maximum."""

    def __init__(self, address: str, content_length: int, limit: int) -> None:
        super().__init__(
            f"Cannot read {address}: declared size {content_length} bytes "
            f"exceeds the {limit} bytes limit"
        )
        self.address = address
        self.content_length = content_length
        self.limit = limit


class RetrievalExhausted(RetrievalError):
    """Raised after every request attempt failed."""

    def __init__(
        self,
        address: str,
        attempts: int,
        errors: Optional[List[BaseException]] = None,
    ) -> None:
        super().__init__(f"{address} could not be loaded after {attempts} attempts")
        self.address = address
        self.attempts = attempts
        self.errors = list(errors or [])


class StreamReadError(RetrievalError):
    """Raised when reading the body fails after the response headers arrived."""

    def __init__(self, address: str, message: str) -> None:
        super().__init__(f"Error reading content of {address}: {message}")
        self.address = address
