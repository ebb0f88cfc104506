"""
Custom exceptions for wiki_walk.
"""

class WikiWalkException(Exception):
    """Base exception for the application."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

class PageNotFoundException(WikiWalkException):
    """Raised when a specific Wikipedia page cannot be found."""
    pass

class PageIneligibleException(WikiWalkException):
    """Raised when a page exists but lives outside the article namespace."""
    pass

class WikiServiceUnavailableException(WikiWalkException):
    """Raised when the Wikipedia API is unreachable or returns an error."""
    pass

class StartPageNotFoundException(PageNotFoundException):
    """Raised when the start page of a walk does not exist."""
    pass

class StartPageIneligibleException(PageIneligibleException):
    """Raised when the start page of a walk is not an article."""
    pass

class InternalInconsistencyError(WikiWalkException):
    """Raised when the parent chain of a discovered page is malformed."""
    pass
