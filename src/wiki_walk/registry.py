"""
Node registry for a single walk.

Discovered pages are stored in an arena keyed by title. Each node refers to
its parent by title only, so parent chains point backward and reconstructing
a path is a simple walk to the root.
"""
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from wiki_walk.exceptions import InternalInconsistencyError


@dataclass
class Node:
    """A discovered page."""
    title: str  # Canonical title
    parent: Optional[str] = None  # None only for the start page
    depth: int = 0
    links: Optional[Tuple[str, ...]] = None  # Assigned once, complete

    def set_links(self, links: List[str]) -> None:
        if self.links is not None:
            raise InternalInconsistencyError(f"Links of '{self.title}' were already assigned")
        self.links = tuple(links)


class NodeRegistry:
    """Arena of discovered nodes. The first registration of a title wins."""

    def __init__(self):
        self._nodes: Dict[str, Node] = {}
        self.root: Optional[str] = None

    def __contains__(self, title: str) -> bool:
        return title in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes.values())

    def get(self, title: str) -> Node:
        return self._nodes[title]

    def add_root(self, title: str, links: List[str]) -> Node:
        if self._nodes:
            raise InternalInconsistencyError("Registry already has a root")
        node = Node(title=title)
        node.set_links(links)
        self._nodes[title] = node
        self.root = title
        return node

    def add(self, node: Node) -> bool:
        """
        Register a discovered node.

        Returns:
            True if the node was registered, False if a node with the same
            title was registered first (the new copy is discarded).
        """
        if node.title in self._nodes:
            return False
        if node.parent not in self._nodes:
            raise InternalInconsistencyError(
                f"Parent '{node.parent}' of '{node.title}' is not registered"
            )
        self._nodes[node.title] = node
        return True

    def path_to(self, node: Node) -> Tuple[str, ...]:
        """
        Reconstruct the path from the root to ``node`` by following parents.

        ``node`` itself does not need to be registered, which lets the walker
        build the path to the target without committing it.
        """
        path = [node.title]
        seen = {node.title}
        parent = node.parent
        while parent is not None:
            if parent in seen:
                raise InternalInconsistencyError(f"Parent chain of '{node.title}' loops at '{parent}'")
            current = self._nodes.get(parent)
            if current is None:
                raise InternalInconsistencyError(f"Parent '{parent}' of '{path[-1]}' is not registered")
            seen.add(parent)
            path.append(current.title)
            parent = current.parent
        if path[-1] != self.root:
            raise InternalInconsistencyError(f"Parent chain of '{node.title}' does not reach the start page")
        return tuple(reversed(path))
