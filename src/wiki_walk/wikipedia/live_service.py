import asyncio
import logging
import urllib.parse
from typing import Any, Dict, List, Optional

import httpx

from wiki_walk.config import WalkConfig
from wiki_walk.exceptions import (
    PageIneligibleException,
    PageNotFoundException,
    WikiServiceUnavailableException,
)
from wiki_walk.models import Page, PageInfo
from wiki_walk.sources.base import NeighborSource, dedupe_links


class LiveWikiService(NeighborSource):
    """
    Neighbor source backed by the live MediaWiki query API.
    All methods are asynchronous.

    One ``httpx.AsyncClient`` is shared by every request; use the service as
    an async context manager or call ``aclose()`` when done. Request
    parameters are built fresh for every request.
    """
    def __init__(self, config: Optional[WalkConfig] = None, client: Optional[httpx.AsyncClient] = None):
        self.config = config or WalkConfig()
        self.base_url = self.config.api_url
        self.logger = logging.getLogger(__name__)
        self._client = client
        self._owns_client = client is None
        self._semaphore = asyncio.Semaphore(self.config.max_concurrent_requests)

    async def __aenter__(self) -> "LiveWikiService":
        self._get_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.config.request_timeout,
                headers={"User-Agent": self.config.user_agent, "Accept-Encoding": "gzip"},
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _base_params(self) -> Dict[str, str]:
        return {"action": "query", "format": "json", "formatversion": "2", "redirects": "1"}

    async def _make_request(self, params: Dict[str, str]) -> Dict[str, Any]:
        """Make a single API request, mapping every transport problem to a transient error."""
        client = self._get_client()
        self.logger.debug(f"Making API request: {params}")
        async with self._semaphore:
            try:
                response = await client.get(self.base_url, params=params)
                response.raise_for_status()
                data = response.json()
            except httpx.HTTPError as e:
                raise WikiServiceUnavailableException(f"Wikipedia API request failed: {e}")
            except ValueError as e:
                raise WikiServiceUnavailableException(f"Wikipedia API returned invalid JSON: {e}")

        if "error" in data:
            raise WikiServiceUnavailableException(f"Wikipedia API error: {data['error'].get('info', data['error'])}")
        return data

    def _single_page(self, data: Dict[str, Any], title: str) -> Dict[str, Any]:
        pages = data.get("query", {}).get("pages", [])
        if not pages:
            raise PageNotFoundException(f"Page not found: {title}")
        page = pages[0]
        if page.get("missing") or page.get("invalid"):
            raise PageNotFoundException(f"Page does not exist: {title}")
        return page

    async def resolve(self, title: str) -> PageInfo:
        params = self._base_params()
        params.update({"prop": "info", "titles": title})
        data = await self._make_request(params)
        page = self._single_page(data, title)
        return PageInfo(title=page["title"], namespace=page.get("ns", 0))

    async def get_links(self, title: str) -> List[str]:
        """
        Fetch every outgoing link of a page, following ``continue`` tokens
        until the API stops returning one.
        """
        all_links: List[str] = []
        continue_data: Dict[str, str] = {}

        while True:
            params = self._base_params()
            params.update({"prop": "links", "titles": title, "pllimit": "max"})
            if self.config.article_links_only:
                params["plnamespace"] = "0"
            params.update(continue_data)

            data = await self._make_request(params)
            page = self._single_page(data, title)
            all_links.extend(link["title"] for link in page.get("links", []))

            next_continue = data.get("continue")
            if not next_continue:
                break
            if next_continue == continue_data:
                raise WikiServiceUnavailableException(f"Pagination for '{title}' did not advance: {next_continue}")
            continue_data = {key: str(value) for key, value in next_continue.items()}
            self.logger.debug(f"Continuing pagination for '{title}'...")

        self.logger.debug(f"Retrieved {len(all_links)} links for '{title}'")
        return dedupe_links(all_links)

    async def get_page(self, title: str) -> Page:
        info = await self.resolve(title)
        if not info.eligible:
            raise PageIneligibleException(f"Page is not an article: {info.title}")
        links = await self.get_links(info.title)
        return Page(
            title=info.title,
            url=f"https://{self.config.language}.wikipedia.org/wiki/{urllib.parse.quote(info.title.replace(' ', '_'))}",
            links=links,
        )
