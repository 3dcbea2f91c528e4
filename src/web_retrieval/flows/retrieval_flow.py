"""
Retrieval flow

Prefect flow that runs one retrieval job over a list of addresses:

1. Validates the job configuration (name, addresses, destination, mode).
2. For each address, depending on `mode`:
   - "download": saves the file under `<destination_path>/<job_name>/YYYYMMDD/`;
   - "text": fetches the body as text (optionally sniffing its charset);
   - "resolve": only reports the address the server finally answers from.
3. Returns one result dictionary per address. An address that fails is
   logged and reported with its error; the remaining ones still run.
"""

from __future__ import annotations

from typing import List

from prefect import flow, get_run_logger

from web_retrieval.core.config import RetrievalJobConfig
from web_retrieval.core.errors import RetrievalError
from web_retrieval.core.retrieval.prefect_tasks import (
    download_file_task,
    fetch_text_task,
    resolve_redirect_task,
)


@flow(name="Retrieval Job")
def retrieval_flow(config_dict: dict) -> List[dict]:
    """Run the retrieval job described by `config_dict`.

    config_dict: must conform to `RetrievalJobConfig`.
    """
    logger = get_run_logger()
    try:
        config = RetrievalJobConfig(**config_dict)
        logger.info("Config valid for job: %s", config.job_name)
    except Exception as e:
        logger.error("Invalid config: %s", e)
        raise

    results: List[dict] = []
    for url in config.source_urls:
        try:
            if config.mode == "resolve":
                result = resolve_redirect_task(url, config=config.retrieval)
            elif config.mode == "text":
                result = fetch_text_task(
                    url,
                    detect_encoding=config.detect_encoding,
                    config=config.retrieval,
                )
            else:
                result = download_file_task(
                    url, dest_dir=config.job_path, config=config.retrieval
                )
        except RetrievalError as exc:
            logger.error("Retrieval failed for %s: %s", url, exc)
            result = {"url": url, "error": str(exc)}
        results.append(result)

    failed = sum(1 for r in results if "error" in r)
    logger.info(
        "Job %s finished: %d ok, %d failed",
        config.job_name,
        len(results) - failed,
        failed,
    )
    return results


if __name__ == "__main__":
    payload = {
        "job_name": "example_pages",
        "source_urls": ["https://example.org/", "http://example.com/"],
        "mode": "resolve",
    }
    for row in retrieval_flow(payload):
        print(row)
