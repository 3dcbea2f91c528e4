"""
Downloader

Saves a single remote file into a folder organized by date
(e.g. `data/20251122/report.pdf`) and returns a dictionary describing it:
where it was saved, which address actually served it, its size and its
SHA-256 hash.

The body is streamed straight to disk by `Retriever.fetch_to_file`, so large
files never sit in memory.
"""

from __future__ import annotations

import datetime
import hashlib
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import urlparse

from web_retrieval.core.locator import LocatorLike, as_locator
from web_retrieval.core.retrieval.retriever import Retriever

HASH_CHUNK_SIZE = 8192


class Downloader:
    """Download one file and describe it.

    - `Downloader().download(url, dest_dir)` saves the file and returns its
      metadata (path, url, resolved_url, sha256, size).
    - A `Retriever` can be injected, which makes testing with a fake
      transport straightforward.
    """

    def __init__(self, retriever: Retriever | None = None):
        self.retriever = retriever or Retriever()

    def _filename_from_url(self, url: str) -> str:
        """Take the last path segment of `url` as the file name.

        - https://example.org/files/report.pdf -> 'report.pdf'
        - https://example.org/download?id=123 -> no clear name, so a
          timestamped one is generated to avoid collisions.
        """
        name = Path(urlparse(url).path).name
        return name or f"download-{int(datetime.datetime.utcnow().timestamp())}"

    def _sha256(self, path: Path) -> str:
        hasher = hashlib.sha256()
        with open(path, "rb") as fh:
            for block in iter(lambda: fh.read(HASH_CHUNK_SIZE), b""):
                hasher.update(block)
        return hasher.hexdigest()

    def download(self, url: LocatorLike, dest_dir: str = "data") -> Dict[str, Optional[str]]:
        """Download `url` into `dest_dir/YYYYMMDD/`.

        1. Build the target path from the requested address and today's date.
        2. Stream the body to that path (retries and the size guard apply).
        3. Hash the saved file and return the metadata.

        The file name comes from the requested address, not the redirect
        target, so re-running a job overwrites the same file.
        """
        loc = as_locator(url)
        filename = self._filename_from_url(loc.address)
        date_folder = datetime.datetime.utcnow().strftime("%Y%m%d")
        out_dir = Path(dest_dir) / date_folder
        out_dir.mkdir(parents=True, exist_ok=True)
        out_path = out_dir / filename

        resolved = self.retriever.fetch_to_file(loc, out_path)

        return {
            "path": str(out_path),
            "url": loc.address,
            "resolved_url": resolved.address,
            "sha256": self._sha256(out_path),
            "size": str(out_path.stat().st_size),
        }
