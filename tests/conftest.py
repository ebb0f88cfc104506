"""
Pytest configuration and shared fixtures for wiki_walk tests.
"""

import logging
from typing import Dict, List

import pytest

from wiki_walk.config import WalkConfig
from wiki_walk.sources.in_memory import InMemoryNeighborSource

# Configure logging for tests
logging.basicConfig(level=logging.INFO)

@pytest.fixture
def diamond_graph() -> Dict[str, List[str]]:
    """A -> {B, C}, B -> {D}, C -> {D}, D -> {}."""
    return {
        "A": ["B", "C"],
        "B": ["D"],
        "C": ["D"],
        "D": [],
    }

@pytest.fixture
def diamond_source(diamond_graph: Dict[str, List[str]]) -> InMemoryNeighborSource:
    return InMemoryNeighborSource(diamond_graph)

@pytest.fixture
def config() -> WalkConfig:
    """Default config with per-page progress logging switched off."""
    return WalkConfig(log_progress=False)
