from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class Notification:
    """A broadcast message for one role (or ``all``).

    ``read_by`` holds register numbers of users who dismissed it.
    """

    notification_id: str
    title: str
    message: str
    created_at: datetime
    target_role: str
    read_by: frozenset[str] = field(default_factory=frozenset)
