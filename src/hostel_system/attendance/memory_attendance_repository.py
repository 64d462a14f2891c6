from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from .model import AttendanceEntry, Resident, RollCall
from .repository import AttendanceRepository


class InMemoryAttendanceRepository(AttendanceRepository):
    def __init__(self):
        self._residents: dict[str, Resident] = {}
        self._entries: dict[tuple[str, date], AttendanceEntry] = {}
        self._roll_calls: dict[date, RollCall] = {}

    def add_resident(self, resident: Resident) -> None:
        self._residents[resident.register_number] = resident

    def get_resident(self, register_number: str) -> Optional[Resident]:
        return self._residents.get(register_number)

    def list_residents(self, *, room: Optional[str] = None, floor: Optional[str] = None) -> Sequence[Resident]:
        rows = [
            r
            for r in self._residents.values()
            if (room is None or r.room == room) and (floor is None or r.floor == floor)
        ]
        rows.sort(key=lambda r: r.register_number)
        return rows

    def upsert_entry(self, entry: AttendanceEntry) -> None:
        self._entries[(entry.register_number, entry.on_date)] = entry

    def get_entry(self, register_number: str, on_date: date) -> Optional[AttendanceEntry]:
        return self._entries.get((register_number, on_date))

    def list_entries(
        self,
        *,
        on_date: Optional[date] = None,
        register_number: Optional[str] = None,
    ) -> Sequence[AttendanceEntry]:
        rows = [
            e
            for e in self._entries.values()
            if (on_date is None or e.on_date == on_date)
            and (register_number is None or e.register_number == register_number)
        ]
        rows.sort(key=lambda e: e.on_date, reverse=True)
        return rows

    def get_roll_call(self, on_date: date) -> Optional[RollCall]:
        return self._roll_calls.get(on_date)

    def add_roll_call(self, roll_call: RollCall) -> None:
        self._roll_calls[roll_call.on_date] = roll_call
