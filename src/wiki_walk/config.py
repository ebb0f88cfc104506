import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


class WalkConfig(BaseModel):
    """Configuration for a walk and the live Wikipedia source behind it."""

    # Wikipedia API settings
    language: str = "en"
    request_timeout: float = 10.0
    user_agent: str = "wiki-walk/0.1 (shortest link path finder)"
    max_concurrent_requests: int = Field(16, ge=1)
    article_links_only: bool = True

    # Retry settings for transient API failures
    max_retries: int = Field(3, ge=1)

    # Search settings
    max_depth: Optional[int] = Field(None, ge=0)
    log_progress: bool = True

    @property
    def api_url(self) -> str:
        return f"https://{self.language}.wikipedia.org/w/api.php"

    @classmethod
    def from_env(cls) -> "WalkConfig":
        """Create config from environment variables (and a .env file, if present)."""
        load_dotenv()
        max_depth = os.getenv("WIKI_WALK_MAX_DEPTH")
        return cls(
            language=os.getenv("WIKI_WALK_LANGUAGE", "en"),
            request_timeout=float(os.getenv("WIKI_WALK_REQUEST_TIMEOUT", "10.0")),
            user_agent=os.getenv("WIKI_WALK_USER_AGENT", cls.model_fields["user_agent"].default),
            max_concurrent_requests=int(os.getenv("WIKI_WALK_MAX_CONCURRENT_REQUESTS", "16")),
            article_links_only=os.getenv("WIKI_WALK_ARTICLE_LINKS_ONLY", "true").lower() == "true",
            max_retries=int(os.getenv("WIKI_WALK_MAX_RETRIES", "3")),
            max_depth=int(max_depth) if max_depth else None,
            log_progress=os.getenv("WIKI_WALK_LOG_PROGRESS", "true").lower() == "true",
        )
