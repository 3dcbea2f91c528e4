"""Request issuance with bounded retry, and scoped release of responses.

Shared by every retrieval operation: `request_with_retry` returns the
response of the first successful attempt, and `released` guarantees that
response is closed on every way out of the caller's block.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Callable, List

from web_retrieval.core.config import RetrievalConfig
from web_retrieval.core.errors import RetrievalExhausted
from web_retrieval.core.interfaces import BaseTransport
from web_retrieval.core.locator import Locator

logger = logging.getLogger(__name__)


@contextmanager
def released(response):
    """Close `response` exactly once, whatever way the block is left.

    A failing close never hides an error already on its way out: it is
    logged and the original error keeps propagating. On the success path a
    failing close raises.
    """
    try:
        yield response
    except BaseException:
        _discard(response)
        raise
    else:
        response.close()


def _discard(response) -> None:
    try:
        response.close()
    except Exception:
        logger.warning(
            "Failed to release response for %s",
            getattr(response, "url", "?"),
            exc_info=True,
        )


def request_with_retry(
    fetcher: BaseTransport,
    locator: Locator,
    config: RetrievalConfig,
    sleep: Callable[[float], None] = time.sleep,
):
    """Issue a streamed GET for `locator`, retrying the request phase.

    Returns the response of the first successful attempt; the caller owns it
    and must release it. Connection errors, timeouts and non-success status
    codes count as failed attempts, each one followed by the configured delay
    while attempts remain. After `config.max_attempts` failures raises
    `RetrievalExhausted`, chained to the last failure.
    """
    errors: List[BaseException] = []
    for attempt in range(1, config.max_attempts + 1):
        response = None
        try:
            response = fetcher.stream_get(locator.address)
            response.raise_for_status()
            return response
        except BaseException as exc:
            if response is not None:
                _discard(response)
            # requests.RequestException derives from OSError
            if not isinstance(exc, OSError):
                raise
            errors.append(exc)
            logger.warning(
                "Attempt %d/%d failed for %s: %s",
                attempt,
                config.max_attempts,
                locator.address,
                exc,
            )
        if attempt < config.max_attempts:
            sleep(config.retry_delay_seconds)

    logger.error(
        "Giving up on %s after %d attempts", locator.address, config.max_attempts
    )
    raise RetrievalExhausted(
        locator.address, config.max_attempts, errors
    ) from errors[-1]

