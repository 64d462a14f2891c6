from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from ..core.enums import Audience, Reaction


@dataclass(frozen=True)
class Feedback:
    user_id: str
    user_name: str
    reason: str


@dataclass(frozen=True)
class Announcement:
    announcement_id: str
    title: str
    content: str
    created_at: datetime
    author: str
    target_audience: Audience
    # register_number -> reaction; one reaction per user
    reactions: dict[str, Reaction] = field(default_factory=dict)
    feedback: tuple[Feedback, ...] = ()

    def count(self, kind: Reaction) -> int:
        return sum(1 for r in self.reactions.values() if r == kind)
