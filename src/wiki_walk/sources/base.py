"""
Neighbor source interface.

A neighbor source answers two questions about a page: does it exist as an
article (``resolve``), and which pages does it link to (``get_links``).
The walker only ever talks to a source through this interface.
"""

from abc import ABC, abstractmethod
from typing import List

from wiki_walk.exceptions import PageIneligibleException
from wiki_walk.models import Page, PageInfo


class NeighborSource(ABC):
    """
    Base class for anything the walker can discover links from.

    Implementations must be safe to call concurrently: every call is
    independent and shares no mutable request state with other calls.
    """

    @abstractmethod
    async def resolve(self, title: str) -> PageInfo:
        """
        Look up a page, following normalization and redirects.

        Args:
            title: Page title as it appears in a link

        Returns:
            PageInfo with the canonical title and namespace

        Raises:
            PageNotFoundException: if the page does not exist
            WikiServiceUnavailableException: on any transport failure
        """
        pass

    @abstractmethod
    async def get_links(self, title: str) -> List[str]:
        """
        Get the complete outgoing link list of a page.

        Pagination is drained before returning, so the result is the
        whole edge list in source order, without duplicates.

        Raises:
            PageNotFoundException: if the page does not exist
            WikiServiceUnavailableException: on any transport failure
        """
        pass

    async def get_page(self, title: str) -> Page:
        """Resolve a page and fetch its links in one call."""
        info = await self.resolve(title)
        if not info.eligible:
            raise PageIneligibleException(f"Page is not an article: {info.title}")
        links = await self.get_links(info.title)
        return Page(title=info.title, links=links)

    async def aclose(self) -> None:
        """Release any resources held by the source."""
        pass


def dedupe_links(links: List[str]) -> List[str]:
    """Drop repeated titles, keeping the first occurrence of each."""
    return list(dict.fromkeys(links))
