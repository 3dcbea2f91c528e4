"""Downloader tests.

They check that a file lands under `dest_dir/YYYYMMDD/<name>`, that the
returned metadata (size, hash, served address) describes what was saved,
and that a URL without a file name still gets a usable one. The transport
is a fake: nothing touches the network.
"""

import hashlib
from pathlib import Path

import pytest
import requests
from conftest import DummyResponse

from web_retrieval.core.errors import RetrievalExhausted
from web_retrieval.core.retrieval.downloader import Downloader


def test_download_saves_file_and_returns_metadata(make_retriever, tmp_path):
    body = b"%PDF-1.4 fake pdf content" * 1000
    retriever, _ = make_retriever(
        DummyResponse(body, url="https://cdn.example.org/files/report.pdf")
    )

    info = Downloader(retriever).download(
        "https://example.org/files/report.pdf", str(tmp_path)
    )

    path = Path(info["path"])
    assert path.name == "report.pdf"
    assert path.parent.parent == tmp_path
    assert len(path.parent.name) == 8 and path.parent.name.isdigit()
    assert path.read_bytes() == body
    assert info["url"] == "https://example.org/files/report.pdf"
    assert info["resolved_url"] == "https://cdn.example.org/files/report.pdf"
    assert info["size"] == str(len(body))
    assert info["sha256"] == hashlib.sha256(body).hexdigest()


def test_filename_fallback_for_urls_without_name(make_retriever, tmp_path):
    retriever, _ = make_retriever(DummyResponse(b"data"))

    info = Downloader(retriever).download("https://example.org/?id=1", str(tmp_path))

    assert Path(info["path"]).name.startswith("download-")


def test_failed_download_propagates(make_retriever, tmp_path):
    retriever, _ = make_retriever(requests.ConnectionError("down"))

    with pytest.raises(RetrievalExhausted):
        Downloader(retriever).download("https://example.org/a.csv", str(tmp_path))

    assert not list(tmp_path.rglob("a.csv"))
