from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from ..core.enums import AttendanceMark


@dataclass(frozen=True)
class Resident:
    """A hostel resident on the roll-call roster."""

    register_number: str
    name: str
    room: str
    floor: str


@dataclass(frozen=True)
class AttendanceEntry:
    register_number: str
    on_date: date
    status: AttendanceMark
    marked_by: str
    marked_at: datetime


@dataclass(frozen=True)
class RollCall:
    """A day's roll call once the warden has finalised it."""

    on_date: date
    closed_by: str
    closed_at: datetime
