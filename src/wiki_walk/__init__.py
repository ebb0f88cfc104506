"""
wiki_walk - Core Library

Shortest link paths between Wikipedia pages, discovered on demand from a
neighbor source such as the live Wikipedia API.
"""

from .config import WalkConfig
from .models import Page, PageInfo, WalkResult, WalkStatus
from .walker import WikiWalker, walk

__all__ = ['WalkConfig', 'Page', 'PageInfo', 'WalkResult', 'WalkStatus', 'WikiWalker', 'walk']
