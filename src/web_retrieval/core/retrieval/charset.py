"""Charset sniffing from markers inside the content itself.

The HTTP headers are not consulted: the declared charset is looked up in the
body, decoded provisionally as ASCII, the way an HTML page declares it.
"""

from __future__ import annotations

import codecs
import re
from typing import Optional

DEFAULT_ENCODING = "ascii"

# `.` does not cross line breaks, so a match stays on the declaring line.
_CHARSET_ATTR = re.compile(r'charset="(?P<charset>.*)"')
_META_CONTENT = re.compile(r'<meta .*?content=".*?charset=(?P<charset>.*)"')


def _lookup(name: str) -> Optional[str]:
    try:
        codec = codecs.lookup(name).name
        # binary codecs (base64, zlib, rot13...) cannot decode to text
        b"".decode(codec)
    except (LookupError, ValueError):
        # ValueError: the name holds a NUL byte
        return None
    return codec


def resolve_charset(text: str) -> Optional[str]:
    """Return the codec name declared in `text`, or None if unresolved.

    Looks for ``charset="..."`` first, then for a ``<meta ... content="...
    charset=...">`` declaration. Anything after the first space of the
    captured value is dropped (``utf-8" />`` gives ``utf-8``). Unknown
    names resolve to None instead of raising.
    """
    m = _CHARSET_ATTR.search(text)
    if not m:
        m = _META_CONTENT.search(text)
    if not m:
        return None

    name = m.group("charset")
    # the greedy capture runs to the last quote of the line, so a cut at the
    # first space leaves the closing quote of the value behind
    if " " in name:
        name = name[: name.index(" ")].rstrip('"')
    if not name:
        return None
    return _lookup(name)


def decode_provisional(data: bytes) -> str:
    """Decode as ASCII, replacing every non-ASCII byte."""
    return data.decode(DEFAULT_ENCODING, errors="replace")


def detect_encoding(data: bytes) -> str:
    """Sniff the encoding of `data`, falling back to ASCII."""
    return resolve_charset(decode_provisional(data)) or DEFAULT_ENCODING
