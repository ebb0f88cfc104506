"""
Wikipedia module for wiki_walk.

Access to the live Wikipedia API as a neighbor source for walks.
"""

from .live_service import LiveWikiService

__all__ = [
    'LiveWikiService'
]
