from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

ARTICLE_NAMESPACE = 0

# --- Enums ---

class WalkStatus(Enum):
    """Outcome of a walk that did not fail outright."""
    FOUND = "found"
    NO_PATH = "no_path"

# --- Data Models ---

class PageInfo(BaseModel):
    """Existence and namespace information for a single page."""
    title: str = Field(..., description="Canonical title after normalization and redirects.")
    namespace: int = Field(ARTICLE_NAMESPACE, description="MediaWiki namespace id of the page.")
    exists: bool = Field(True, description="False when the wiki reports the page as missing.")

    @property
    def eligible(self) -> bool:
        """Only existing articles take part in a walk."""
        return self.exists and self.namespace == ARTICLE_NAMESPACE

class Page(BaseModel):
    """A resolved page together with its complete list of outgoing links."""
    title: str = Field(..., description="Canonical title of the page.")
    url: Optional[str] = Field(None, description="Full URL of the page, when known.")
    links: List[str] = Field(default_factory=list, description="Titles this page links to, in order.")

class WalkResult(BaseModel):
    """Result of a walk between two pages."""
    model_config = ConfigDict(frozen=True)

    status: WalkStatus = Field(..., description="Whether a path was found.")
    start: str = Field(..., description="Canonical title of the start page.")
    target: str = Field(..., description="Canonical title of the target page.")
    path: Optional[Tuple[str, ...]] = Field(None, description="Titles from start to target inclusive.")
    nodes_expanded: int = Field(0, description="Number of pages taken off the frontier.")
    pages_fetched: int = Field(0, description="Number of link lists fetched during the walk.")
    computation_time_ms: float = Field(0.0, description="Wall-clock time of the walk in milliseconds.")

    @property
    def found(self) -> bool:
        return self.status == WalkStatus.FOUND

    @property
    def path_length(self) -> Optional[int]:
        """Number of links followed, None when no path exists."""
        if self.path is None:
            return None
        return len(self.path) - 1

    def __str__(self) -> str:
        if self.path is None:
            return f"no path exists between {self.start} and {self.target}"
        return " -> ".join(self.path)
