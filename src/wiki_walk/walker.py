"""
WikiWalker - shortest link path between two Wikipedia pages.

Breadth-first search over a graph that is discovered while searching. For
every page taken off the frontier, all of its unvisited neighbors are looked
up concurrently, and each lookup also prefetches the neighbor's own links so
the next level does not pay for them one page at a time.

Only the ``walk`` coroutine mutates the visited set, the frontier queue and
the node registry. Neighbor lookups run as tasks that return a prepared
``Node`` (or None) and never write to any of them.
"""

import asyncio
import logging
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque, Dict, List, Optional, Set, Tuple

from wiki_walk.config import WalkConfig
from wiki_walk.exceptions import (
    PageNotFoundException,
    StartPageIneligibleException,
    StartPageNotFoundException,
    WikiServiceUnavailableException,
    WikiWalkException,
)
from wiki_walk.models import WalkResult, WalkStatus
from wiki_walk.registry import Node, NodeRegistry
from wiki_walk.sources.base import NeighborSource

logger = logging.getLogger(__name__)

ExpandHook = Callable[[Node], None]


@dataclass
class _WalkState:
    """Traversal state owned by a single ``walk`` call."""
    start: str
    target: str
    registry: NodeRegistry = field(default_factory=NodeRegistry)
    visited: Set[str] = field(default_factory=set)  # Enqueued or in flight
    queue: Deque[str] = field(default_factory=deque)
    # Link fetches started by neighbor lookups, keyed by canonical title,
    # so aliases of one page share a single fetch
    link_fetches: Dict[str, "asyncio.Task[List[str]]"] = field(default_factory=dict)
    nodes_expanded: int = 0

    @property
    def pages_fetched(self) -> int:
        return len(self.link_fetches) + (1 if self.registry.root is not None else 0)


class WikiWalker:
    """Finds a shortest path between two pages of a neighbor source."""

    def __init__(
        self,
        source: NeighborSource,
        config: Optional[WalkConfig] = None,
        on_expand: Optional[ExpandHook] = None,
    ):
        """
        Args:
            source: Where pages and their links come from
            config: Search settings; defaults to ``WalkConfig()``
            on_expand: Called with every node taken off the frontier. Must not
                mutate the node.
        """
        self.source = source
        self.config = config or WalkConfig()
        self.on_expand = on_expand

    async def walk(self, start: str, target: str) -> WalkResult:
        """
        Find a shortest path from ``start`` to ``target``.

        Returns:
            WalkResult with status FOUND and the path, or NO_PATH once every
            page reachable from start (within ``max_depth``) has been expanded.

        Raises:
            StartPageNotFoundException: start page does not exist
            StartPageIneligibleException: start page is not an article
            WikiServiceUnavailableException: the start page could not be fetched
            InternalInconsistencyError: a malformed parent chain was detected
        """
        start_time = time.time()
        logger.info(f"Finding path from '{start}' to '{target}'")

        canonical_start = await self._resolve_start(start)

        if start == target or canonical_start == target:
            return self._result(_WalkState(canonical_start, canonical_start), (canonical_start,), start_time)

        canonical_target = await self._resolve_target(target)
        state = _WalkState(canonical_start, canonical_target or target)
        if canonical_target is None:
            return self._result(state, None, start_time)
        if canonical_start == canonical_target:
            return self._result(state, (canonical_start,), start_time)

        if self._at_max_depth(0):
            return self._result(state, None, start_time)

        try:
            links = await self.source.get_links(canonical_start)
        except PageNotFoundException as e:
            raise StartPageNotFoundException(e.message)

        state.registry.add_root(canonical_start, links)
        state.visited.add(canonical_start)
        state.queue.append(canonical_start)

        while state.queue:
            top = state.registry.get(state.queue.popleft())
            if self._at_max_depth(top.depth):
                continue
            state.nodes_expanded += 1
            self._report(top)

            path = await self._expand(top, state)
            if path is not None:
                return self._result(state, path, start_time)

        return self._result(state, None, start_time)

    async def _resolve_start(self, start: str) -> str:
        try:
            info = await self.source.resolve(start)
        except PageNotFoundException as e:
            raise StartPageNotFoundException(e.message)
        if not info.eligible:
            raise StartPageIneligibleException(f"Start page is not an article: {info.title}")
        return info.title

    async def _resolve_target(self, target: str) -> Optional[str]:
        """
        Canonical title of the target, or None if it can never be reached.

        A transient failure here is not fatal: the raw title is used instead.
        """
        try:
            info = await self.source.resolve(target)
        except PageNotFoundException:
            logger.warning(f"Target page '{target}' does not exist")
            return None
        except WikiServiceUnavailableException as e:
            logger.warning(
                f"Could not resolve target '{target}', matching it as given: {e.message}. "
                f"If it is a redirect, only links that use this exact title can reach it "
                f"and the walk may exhaust every reachable page without a match"
            )
            return target
        if not info.eligible:
            logger.warning(f"Target page '{info.title}' is not an article")
            return None
        return info.title

    async def _expand(self, top: Node, state: _WalkState) -> Optional[Tuple[str, ...]]:
        """
        Look up every unvisited neighbor of ``top`` concurrently and commit the
        results. Returns the path as soon as a neighbor turns out to be the target.
        """
        tasks = []
        for title in top.links or ():
            if title in state.visited:
                continue
            state.visited.add(title)
            tasks.append(asyncio.create_task(self._discover(title, top, state)))

        if not tasks:
            return None
        logger.debug(f"Expanding '{top.title}': {len(tasks)} of {len(top.links)} links unvisited")

        try:
            for next_result in asyncio.as_completed(tasks):
                node = await next_result
                if node is None:
                    continue
                if node.title == state.target:
                    path = state.registry.path_to(node)
                    logger.info(f"Found target at depth {node.depth} via '{top.title}'")
                    return path
                if not state.registry.add(node):
                    logger.debug(f"'{node.title}' already discovered, dropping copy from '{top.title}'")
                    continue
                state.visited.add(node.title)
                state.queue.append(node.title)
        finally:
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
        return None

    async def _discover(self, title: str, parent: Node, state: _WalkState) -> Optional[Node]:
        """
        Resolve one neighbor and prefetch its links. None means skip it.

        Reads the registry but never writes traversal state; the only shared
        structure it touches is the per-walk table of link fetches.
        """
        if title == state.target:
            # The target was resolved before the walk started
            return Node(title=title, parent=parent.title, depth=parent.depth + 1)
        try:
            info = await self.source.resolve(title)
            if not info.eligible:
                logger.debug(f"Skipping '{info.title}': not an article")
                return None
            node = Node(title=info.title, parent=parent.title, depth=parent.depth + 1)
            if info.title == state.target:
                return node
            if info.title in state.registry:
                logger.debug(f"Skipping '{title}': redirects to discovered page '{info.title}'")
                return None
            if self._at_max_depth(node.depth):
                # Never expanded, so its links are not needed
                return node
            node.set_links(await self._fetch_links(info.title, state))
            return node
        except WikiWalkException as e:
            logger.debug(f"Skipping '{title}': {e.message}")
            return None

    async def _fetch_links(self, title: str, state: _WalkState) -> List[str]:
        # Cooperative fetch: if another lookup is already fetching, await it
        fetch = state.link_fetches.get(title)
        if fetch is None:
            fetch = asyncio.create_task(self.source.get_links(title))
            state.link_fetches[title] = fetch
        return await fetch

    def _at_max_depth(self, depth: int) -> bool:
        return self.config.max_depth is not None and depth >= self.config.max_depth

    def _report(self, node: Node) -> None:
        if self.config.log_progress:
            logger.info(f"Expanding '{node.title}' (depth {node.depth})")
        if self.on_expand is not None:
            self.on_expand(node)

    def _result(self, state: _WalkState, path: Optional[Tuple[str, ...]], start_time: float) -> WalkResult:
        elapsed_ms = (time.time() - start_time) * 1000
        result = WalkResult(
            status=WalkStatus.FOUND if path is not None else WalkStatus.NO_PATH,
            start=state.start,
            target=state.target,
            path=path,
            nodes_expanded=state.nodes_expanded,
            pages_fetched=state.pages_fetched,
            computation_time_ms=elapsed_ms,
        )
        if result.found:
            logger.info(f"Path found in {elapsed_ms:.0f}ms, length {result.path_length}: {result}")
        else:
            logger.warning(f"No path found after expanding {state.nodes_expanded} pages in {elapsed_ms:.0f}ms")
        return result


async def walk(start: str, target: str, config: Optional[WalkConfig] = None,
               on_expand: Optional[ExpandHook] = None) -> WalkResult:
    """Walk the live Wikipedia link graph from ``start`` to ``target``."""
    from wiki_walk.sources.retrying import RetryingNeighborSource
    from wiki_walk.wikipedia.live_service import LiveWikiService

    config = config or WalkConfig()
    source: NeighborSource = LiveWikiService(config)
    if config.max_retries > 1:
        source = RetryingNeighborSource(source, max_tries=config.max_retries)
    try:
        return await WikiWalker(source, config, on_expand).walk(start, target)
    finally:
        await source.aclose()
