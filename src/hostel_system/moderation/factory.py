from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .gateway import ContentModerator
from .http_moderator import HttpModerator
from .keyword_moderator import KeywordModerator


@dataclass
class ModeratorFactory:
    """Factory Pattern: choose the moderation backend from settings."""

    backend: str = "keyword"
    url: Optional[str] = None
    api_key: Optional[str] = None
    timeout: float = 30.0

    def create(self) -> ContentModerator:
        backend = (self.backend or "keyword").lower()
        if backend == "http":
            if not self.url:
                raise ValueError("MODERATION_URL is required for the http moderation backend")
            return HttpModerator(self.url, api_key=self.api_key, timeout=self.timeout)
        if backend == "keyword":
            return KeywordModerator()
        raise ValueError(f"Unknown moderation backend: {self.backend}")
