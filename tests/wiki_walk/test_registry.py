import pytest

from wiki_walk.exceptions import InternalInconsistencyError
from wiki_walk.registry import Node, NodeRegistry


@pytest.fixture
def registry() -> NodeRegistry:
    registry = NodeRegistry()
    registry.add_root("A", ["B"])
    registry.add(Node(title="B", parent="A", depth=1, links=("C",)))
    registry.add(Node(title="C", parent="B", depth=2, links=()))
    return registry


def test_path_to_registered_node(registry: NodeRegistry):
    assert registry.path_to(registry.get("C")) == ("A", "B", "C")


def test_path_to_root_is_single_title(registry: NodeRegistry):
    assert registry.path_to(registry.get("A")) == ("A",)


def test_path_to_unregistered_node(registry: NodeRegistry):
    """The target is never registered; its path is built from its parent."""
    target = Node(title="T", parent="C", depth=3)
    assert registry.path_to(target) == ("A", "B", "C", "T")
    assert "T" not in registry


def test_first_registration_wins(registry: NodeRegistry):
    copy = Node(title="C", parent="A", depth=1, links=())

    assert registry.add(copy) is False
    assert registry.get("C").parent == "B"
    assert len(registry) == 3


def test_unregistered_parent_is_rejected(registry: NodeRegistry):
    with pytest.raises(InternalInconsistencyError):
        registry.add(Node(title="X", parent="Nowhere", depth=1))


def test_second_root_is_rejected(registry: NodeRegistry):
    with pytest.raises(InternalInconsistencyError):
        registry.add_root("Z", [])


def test_links_are_assigned_once():
    node = Node(title="A")
    node.set_links(["B", "C"])

    assert node.links == ("B", "C")
    with pytest.raises(InternalInconsistencyError):
        node.set_links(["D"])


def test_cyclic_parent_chain_is_detected(registry: NodeRegistry):
    # Corrupt the arena directly; add() would never allow this
    registry._nodes["A"].parent = "C"

    with pytest.raises(InternalInconsistencyError, match="loops"):
        registry.path_to(registry.get("C"))


def test_chain_not_reaching_root_is_detected():
    registry = NodeRegistry()
    registry.add_root("A", [])
    registry._nodes["B"] = Node(title="B", parent=None, depth=1)

    with pytest.raises(InternalInconsistencyError, match="does not reach"):
        registry.path_to(Node(title="T", parent="B", depth=2))
