from .base import NeighborSource
from .in_memory import InMemoryNeighborSource
from .retrying import RetryingNeighborSource

__all__ = [
    'NeighborSource',
    'InMemoryNeighborSource',
    'RetryingNeighborSource'
]
