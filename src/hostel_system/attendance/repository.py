from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceEntry, Resident, RollCall


class AttendanceRepository(Protocol):
    def add_resident(self, resident: Resident) -> None:
        raise NotImplementedError

    def get_resident(self, register_number: str) -> Optional[Resident]:
        raise NotImplementedError

    def list_residents(self, *, room: Optional[str] = None, floor: Optional[str] = None) -> Sequence[Resident]:
        raise NotImplementedError

    def upsert_entry(self, entry: AttendanceEntry) -> None:
        raise NotImplementedError

    def get_entry(self, register_number: str, on_date: date) -> Optional[AttendanceEntry]:
        raise NotImplementedError

    def list_entries(
        self,
        *,
        on_date: Optional[date] = None,
        register_number: Optional[str] = None,
    ) -> Sequence[AttendanceEntry]:
        raise NotImplementedError

    def get_roll_call(self, on_date: date) -> Optional[RollCall]:
        raise NotImplementedError

    def add_roll_call(self, roll_call: RollCall) -> None:
        raise NotImplementedError
