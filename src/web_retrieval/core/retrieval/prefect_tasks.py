"""Prefect tasks wrapping the retrieval components.

Each task is a thin adapter adding run logs around one retrieval operation.
Task-level retries stay off: the `Retriever` already retries the request
phase with its own fixed policy, and stacking both would multiply attempts.
"""

from __future__ import annotations

from typing import Optional

from prefect import get_run_logger, task

from web_retrieval.core.config import RetrievalConfig
from web_retrieval.core.retrieval.downloader import Downloader
from web_retrieval.core.retrieval.retriever import Retriever


@task(name="fetch_text", retries=0)
def fetch_text_task(
    url: str,
    encoding: Optional[str] = None,
    detect_encoding: bool = False,
    config: Optional[RetrievalConfig] = None,
) -> dict:
    logger = get_run_logger()
    logger.info("Fetching text: %s", url)
    with Retriever(config=config) as r:
        text, resolved = r.fetch_text(
            url, encoding=encoding, detect_encoding=detect_encoding
        )
    logger.info("Fetched %s (%d characters)", resolved.address, len(text))
    return {"url": url, "resolved_url": resolved.address, "text": text}


@task(name="download_file", retries=0)
def download_file_task(
    file_url: str, dest_dir: str = "data", config: Optional[RetrievalConfig] = None
) -> dict:
    logger = get_run_logger()
    with Retriever(config=config) as r:
        info = Downloader(r).download(file_url, dest_dir)
    logger.info(
        "Saved file %s (size=%s bytes, sha256=%s)",
        info.get("path"),
        info.get("size"),
        info.get("sha256"),
    )
    return info


@task(name="resolve_redirect", retries=0)
def resolve_redirect_task(url: str, config: Optional[RetrievalConfig] = None) -> dict:
    logger = get_run_logger()
    with Retriever(config=config) as r:
        resolved = r.resolve_final_locator(url)
    logger.info("Resolved %s -> %s", url, resolved.address)
    return {"url": url, "resolved_url": resolved.address}
