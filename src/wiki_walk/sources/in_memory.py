"""
Dict-backed neighbor source.

Serves a fixed link graph through the same contract as the live Wikipedia
service, including paginated link lists, so the walker can be exercised
offline. Mostly intended for tests and demonstrations.
"""

import asyncio
import logging
from collections import Counter
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from wiki_walk.exceptions import PageNotFoundException, WikiServiceUnavailableException
from wiki_walk.models import ARTICLE_NAMESPACE, PageInfo
from wiki_walk.sources.base import NeighborSource, dedupe_links

logger = logging.getLogger(__name__)


class InMemoryNeighborSource(NeighborSource):
    """Neighbor source over an in-memory ``{title: [links]}`` graph."""

    def __init__(
        self,
        graph: Mapping[str, Sequence[str]],
        redirects: Optional[Mapping[str, str]] = None,
        namespaces: Optional[Mapping[str, int]] = None,
        failures: Optional[Iterable[str]] = None,
        link_failures: Optional[Iterable[str]] = None,
        page_size: Optional[int] = None,
        delays: Optional[Mapping[str, float]] = None,
    ):
        """
        Args:
            graph: Outgoing links per page. Every key is an existing page.
            redirects: Alias title -> canonical title.
            namespaces: Namespace per page; pages not listed are articles.
                Pages listed here but absent from ``graph`` exist without links.
            failures: Titles whose lookups raise a transient error.
            link_failures: Titles that resolve normally but whose link fetch
                raises a transient error on its last continuation page.
            page_size: Links served per continuation page (None = one page).
            delays: Seconds to sleep before answering for a given title.
        """
        if page_size is not None and page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.graph: Dict[str, List[str]] = {title: list(links) for title, links in graph.items()}
        self.redirects = dict(redirects or {})
        self.namespaces = dict(namespaces or {})
        self.failures = set(failures or ())
        self.link_failures = set(link_failures or ())
        self.page_size = page_size
        self.delays = dict(delays or {})

        self.resolve_calls: Counter = Counter()
        self.link_calls: Counter = Counter()
        self.page_requests = 0

    def _canonical(self, title: str) -> str:
        return self.redirects.get(title, title)

    def _exists(self, title: str) -> bool:
        return title in self.graph or title in self.namespaces

    async def _simulate_request(self, title: str) -> None:
        self.page_requests += 1
        await asyncio.sleep(self.delays.get(title, 0))
        if title in self.failures:
            raise WikiServiceUnavailableException(f"Simulated failure for '{title}'")

    async def resolve(self, title: str) -> PageInfo:
        self.resolve_calls[title] += 1
        await self._simulate_request(title)
        canonical = self._canonical(title)
        if not self._exists(canonical):
            raise PageNotFoundException(f"Page does not exist: {title}")
        return PageInfo(
            title=canonical,
            namespace=self.namespaces.get(canonical, ARTICLE_NAMESPACE),
        )

    async def _fetch_links_page(self, title: str, offset: int) -> Tuple[List[str], Optional[int]]:
        """Serve one page of links and the offset to continue from, if any."""
        await self._simulate_request(title)
        canonical = self._canonical(title)
        if not self._exists(canonical):
            raise PageNotFoundException(f"Page does not exist: {title}")
        links = self.graph.get(canonical, [])
        end = len(links) if self.page_size is None else offset + self.page_size
        next_offset = end if end < len(links) else None
        if next_offset is None and title in self.link_failures:
            raise WikiServiceUnavailableException(f"Simulated link failure for '{title}' at offset {offset}")
        return links[offset:end], next_offset

    async def get_links(self, title: str) -> List[str]:
        self.link_calls[title] += 1
        all_links: List[str] = []
        offset: Optional[int] = 0
        while offset is not None:
            batch, offset = await self._fetch_links_page(title, offset)
            all_links.extend(batch)
            if offset is not None:
                logger.debug(f"Continuing pagination for '{title}' at offset {offset}")
        return dedupe_links(all_links)
