"""
Tests for the in-memory and retrying neighbor sources.
"""

import pytest

from wiki_walk.exceptions import (
    PageIneligibleException,
    PageNotFoundException,
    WikiServiceUnavailableException,
)
from wiki_walk.models import Page, PageInfo
from wiki_walk.sources.base import NeighborSource, dedupe_links
from wiki_walk.sources.in_memory import InMemoryNeighborSource
from wiki_walk.sources.retrying import RetryingNeighborSource


LINKS = ["B", "C", "D", "C", "E", "F", "G"]


class FlakySource(NeighborSource):
    """Fails a fixed number of times before answering."""

    def __init__(self, failures: int, error: Exception):
        self.failures = failures
        self.error = error
        self.calls = 0
        self.closed = False

    async def resolve(self, title: str) -> PageInfo:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return PageInfo(title=title)

    async def get_links(self, title: str):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return ["X"]

    async def aclose(self) -> None:
        self.closed = True


class TestInMemoryNeighborSource:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("page_size", [1, 2, 3, 6, 7, 100])
    async def test_pagination_drain_matches_single_page(self, page_size):
        paged = InMemoryNeighborSource({"A": LINKS}, page_size=page_size)
        whole = InMemoryNeighborSource({"A": LINKS})

        assert await paged.get_links("A") == await whole.get_links("A")
        assert await paged.get_links("A") == ["B", "C", "D", "E", "F", "G"]

    @pytest.mark.asyncio
    async def test_pagination_issues_one_request_per_page(self):
        source = InMemoryNeighborSource({"A": LINKS}, page_size=3)

        await source.get_links("A")

        assert source.page_requests == 3
        assert source.link_calls["A"] == 1

    @pytest.mark.asyncio
    async def test_resolve_follows_redirects_and_namespaces(self):
        source = InMemoryNeighborSource(
            {"Earth": [], "Category:Planets": ["Earth"]},
            redirects={"Planet Earth": "Earth"},
            namespaces={"Category:Planets": 14},
        )

        earth = await source.resolve("Planet Earth")
        category = await source.resolve("Category:Planets")

        assert earth == PageInfo(title="Earth", namespace=0)
        assert earth.eligible
        assert category.namespace == 14
        assert not category.eligible

    @pytest.mark.asyncio
    async def test_missing_page(self):
        source = InMemoryNeighborSource({"A": []})

        with pytest.raises(PageNotFoundException):
            await source.resolve("B")
        with pytest.raises(PageNotFoundException):
            await source.get_links("B")

    @pytest.mark.asyncio
    async def test_simulated_failure(self):
        source = InMemoryNeighborSource({"A": ["B"]}, failures={"A"})

        with pytest.raises(WikiServiceUnavailableException):
            await source.get_links("A")

    @pytest.mark.asyncio
    async def test_simulated_link_failure(self):
        source = InMemoryNeighborSource({"A": LINKS}, link_failures={"A"}, page_size=3)

        info = await source.resolve("A")

        assert info.eligible
        with pytest.raises(WikiServiceUnavailableException, match="link failure"):
            await source.get_links("A")
        assert source.page_requests == 1 + 3

    @pytest.mark.asyncio
    async def test_get_page(self):
        source = InMemoryNeighborSource(
            {"A": ["B"], "Talk:A": []},
            namespaces={"Talk:A": 1},
        )

        page = await source.get_page("A")

        assert page == Page(title="A", links=["B"])
        with pytest.raises(PageIneligibleException):
            await source.get_page("Talk:A")

    def test_invalid_page_size(self):
        with pytest.raises(ValueError):
            InMemoryNeighborSource({}, page_size=0)


class TestRetryingNeighborSource:

    @pytest.mark.asyncio
    async def test_transient_errors_are_retried(self):
        inner = FlakySource(failures=2, error=WikiServiceUnavailableException("down"))
        source = RetryingNeighborSource(inner, max_tries=3, factor=0)

        assert await source.get_links("A") == ["X"]
        assert inner.calls == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_max_tries(self):
        inner = FlakySource(failures=5, error=WikiServiceUnavailableException("down"))
        source = RetryingNeighborSource(inner, max_tries=2, factor=0)

        with pytest.raises(WikiServiceUnavailableException):
            await source.resolve("A")
        assert inner.calls == 2

    @pytest.mark.asyncio
    async def test_missing_pages_are_not_retried(self):
        inner = FlakySource(failures=5, error=PageNotFoundException("gone"))
        source = RetryingNeighborSource(inner, max_tries=4, factor=0)

        with pytest.raises(PageNotFoundException):
            await source.resolve("A")
        assert inner.calls == 1

    @pytest.mark.asyncio
    async def test_aclose_closes_wrapped_source(self):
        inner = FlakySource(failures=0, error=WikiServiceUnavailableException("down"))

        await RetryingNeighborSource(inner).aclose()

        assert inner.closed


def test_dedupe_links_keeps_first_occurrence():
    assert dedupe_links(["B", "A", "B", "C", "A"]) == ["B", "A", "C"]
