from abc import ABC, abstractmethod
from functools import partial
from typing import Callable, Dict, Optional, TypeVar

T = TypeVar("T")

# Zero-argument callable producing a value on demand (bound to a menu option,
# a scheduled job, etc.).
Producer = Callable[[], T]


class BaseTransport(ABC):
    """
    Contract the retrieval core expects from an HTTP transport.

    The returned object behaves like `requests.Response`: it exposes `url`
    (the address finally requested, after redirects), `headers`,
    `raise_for_status()`, `iter_content(chunk_size)` and `close()`.
    """

    @abstractmethod
    def stream_get(self, url: str, headers: Optional[Dict[str, str]] = None, **kwargs):
        """Issue a GET whose body is read lazily by the caller."""
        raise NotImplementedError()


def as_producer(operation: Callable[..., T], *args, **kwargs) -> Producer[T]:
    """Bind a fetch operation and its arguments into a zero-argument producer.

    Example:
        produce = as_producer(retriever.fetch_text, loc, detect_encoding=True)
        text, resolved = produce()
    """
    return partial(operation, *args, **kwargs)
