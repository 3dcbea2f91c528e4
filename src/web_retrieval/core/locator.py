"""Immutable, validated HTTP(S) address value."""

from __future__ import annotations

from typing import Union

from web_retrieval.core.errors import InvalidAddress

SUPPORTED_PREFIXES = ("http://", "https://")


class Locator:
    """Identifies an HTTP-accessible resource by its address.

    The address is validated once, here; a `Locator` instance never holds an
    address that does not start with ``http://`` or ``https://``.
    Two locators are equal when their address strings are equal.

    Usage:
        loc = Locator("https://example.org/page.html")
        loc.address  # "https://example.org/page.html"
    """

    __slots__ = ("_address",)

    def __init__(self, address: str) -> None:
        if not isinstance(address, str) or not address.startswith(SUPPORTED_PREFIXES):
            raise InvalidAddress(address)
        object.__setattr__(self, "_address", address)

    @property
    def address(self) -> str:
        return self._address

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Locator):
            return NotImplemented
        return self._address == other._address

    def __hash__(self) -> int:
        return hash(self._address)

    def __str__(self) -> str:
        return f"URL [{self._address}]"

    def __repr__(self) -> str:
        return f"Locator({self._address!r})"


LocatorLike = Union[Locator, str]


def as_locator(value: Locator | str) -> Locator:
    """Return `value` unchanged if it is a Locator, else build one from it."""
    if isinstance(value, Locator):
        return value
    return Locator(value)
