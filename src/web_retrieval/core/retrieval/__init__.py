"""Retrieval primitives exported for reuse across flows and callers.

This package contains small building blocks: Fetcher (HTTP transport),
charset sniffing, Retriever, redirect resolution and Downloader, plus Prefect
task wrappers.
"""

from .charset import detect_encoding, resolve_charset
from .downloader import Downloader
from .fetcher import Fetcher
from .prefect_tasks import (
    download_file_task,
    fetch_text_task,
    resolve_redirect_task,
)
from .redirect import resolve_final_locator
from .retriever import Retriever

__all__ = [
    "Fetcher",
    "Retriever",
    "Downloader",
    "resolve_charset",
    "detect_encoding",
    "resolve_final_locator",
    "fetch_text_task",
    "download_file_task",
    "resolve_redirect_task",
]
