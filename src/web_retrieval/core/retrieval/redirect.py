"""Find the address a server finally answers from, without reading the body."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from web_retrieval.core.config import RetrievalConfig
from web_retrieval.core.interfaces import BaseTransport
from web_retrieval.core.locator import Locator, LocatorLike, as_locator
from web_retrieval.core.retrieval.fetcher import Fetcher
from web_retrieval.core.retrieval.session import released, request_with_retry

logger = logging.getLogger(__name__)


def resolve_final_locator(
    locator: LocatorLike,
    fetcher: Optional[BaseTransport] = None,
    config: Optional[RetrievalConfig] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Locator:
    """Follow redirects for `locator` and return the locator finally served.

    Same retry policy as any retrieval. The response is released before
    returning, and the body is never downloaded. A `Fetcher` created here
    is closed before returning.
    """
    loc = as_locator(locator)
    config = config or RetrievalConfig()
    if fetcher is None:
        with Fetcher(timeout=config.timeout, ua_pool=config.user_agents) as own:
            return resolve_final_locator(loc, own, config, sleep)

    response = request_with_retry(fetcher, loc, config, sleep)
    with released(response):
        resolved = Locator(response.url)

    if resolved != loc:
        logger.info("%s redirects to %s", loc.address, resolved.address)
    return resolved
