import logging
from typing import Any, Awaitable, Callable, List

import backoff

from wiki_walk.exceptions import WikiServiceUnavailableException
from wiki_walk.models import PageInfo
from wiki_walk.sources.base import NeighborSource

logger = logging.getLogger(__name__)


class RetryingNeighborSource(NeighborSource):
    """
    Wraps another source and retries transient failures with exponential backoff.

    Missing and ineligible pages are answers, not failures, and are never retried.
    """

    def __init__(self, source: NeighborSource, max_tries: int = 3, factor: float = 0.5, max_value: float = 8.0):
        self.source = source
        self.max_tries = max_tries
        self.factor = factor
        self.max_value = max_value

    def _log_retry(self, details: dict) -> None:
        logger.warning(
            f"Retrying {details['target'].__name__} for {details['args'][0]!r} "
            f"in {details['wait']:.1f}s (attempt {details['tries']}/{self.max_tries})"
        )

    async def _call(self, func: Callable[..., Awaitable[Any]], *args: Any) -> Any:
        retrying = backoff.on_exception(
            backoff.expo,
            WikiServiceUnavailableException,
            max_tries=self.max_tries,
            on_backoff=self._log_retry,
            factor=self.factor,
            max_value=self.max_value,
        )(func)
        return await retrying(*args)

    async def resolve(self, title: str) -> PageInfo:
        return await self._call(self.source.resolve, title)

    async def get_links(self, title: str) -> List[str]:
        return await self._call(self.source.get_links, title)

    async def aclose(self) -> None:
        await self.source.aclose()
