from __future__ import annotations

import logging
import re
from datetime import date
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_enum
from ..core.enums import AttendanceMark, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..notifications.service import NotificationService
from ..users.model import User
from ..users.repository import UserRepository
from .model import AttendanceEntry, Resident, RollCall
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

FLOORS = ["Ground Floor", "1st Floor", "2nd Floor", "3rd Floor"]
STAFF_ROLES = {Role.WARDEN, Role.ADMIN}


def floor_for_room(room: str) -> str:
    """'101' -> '1st Floor', '302-A' -> '3rd Floor', '1001' -> '10th Floor'; anything else is ground."""
    m = re.match(r"\s*(\d+)\d\d(?!\d)", room or "")
    if not m:
        return FLOORS[0]
    idx = int(m.group(1))
    return FLOORS[idx] if idx < len(FLOORS) else f"{idx}th Floor"


class AttendanceService:
    """Nightly hostel roll call marked by wardens."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        notifications: NotificationService,
    ):
        self._attendance = attendance
        self._users = users
        self._notifications = notifications

    def _residents(self) -> dict[str, Resident]:
        residents = {r.register_number: r for r in self._attendance.list_residents()}
        for u in self._users.list_all(role=Role.STUDENT):
            if u.register_number not in residents:
                residents[u.register_number] = Resident(
                    register_number=u.register_number,
                    name=u.name,
                    room=u.room_number,
                    floor=floor_for_room(u.room_number),
                )
        return residents

    def _resident(self, register_number: str) -> Resident:
        resident = self._residents().get(register_number)
        if not resident:
            raise NotFoundError("Resident not found")
        return resident

    @staticmethod
    def _require_staff(current_role: Role) -> None:
        if current_role not in STAFF_ROLES:
            raise AuthorizationError("Only wardens and admins can take attendance")

    def rooms(self, *, floor: Optional[str] = None) -> list[str]:
        return sorted({r.room for r in self._residents().values() if floor is None or r.floor == floor})

    def roster(
        self,
        *,
        current_role: Role,
        on_date: date,
        room: Optional[str] = None,
        floor: Optional[str] = None,
    ) -> list[dict]:
        self._require_staff(current_role)
        rows = []
        for r in sorted(self._residents().values(), key=lambda r: r.register_number):
            if room is not None and r.room != room:
                continue
            if floor is not None and r.floor != floor:
                continue
            entry = self._attendance.get_entry(r.register_number, on_date)
            rows.append(
                {
                    "register_number": r.register_number,
                    "name": r.name,
                    "room": r.room,
                    "floor": r.floor,
                    "status": entry.status.value if entry else None,
                }
            )
        return rows

    def mark(
        self,
        *,
        current_role: Role,
        marked_by: str,
        register_number: str,
        status,
        on_date: date,
    ) -> AttendanceEntry:
        self._require_staff(current_role)
        status = require_enum(AttendanceMark, status, "Attendance status")
        self._resident(register_number)
        if self._attendance.get_roll_call(on_date):
            raise ValidationError("Attendance for this date has already been finalized")

        entry = AttendanceEntry(
            register_number=register_number,
            on_date=on_date,
            status=status,
            marked_by=marked_by,
            marked_at=now_local(),
        )
        self._attendance.upsert_entry(entry)
        return entry

    def finalize(self, *, current_role: Role, closed_by: str, on_date: date) -> RollCall:
        self._require_staff(current_role)
        if self._attendance.get_roll_call(on_date):
            raise ValidationError("Attendance for this date has already been finalized")

        roll_call = RollCall(on_date=on_date, closed_by=closed_by, closed_at=now_local())
        self._attendance.add_roll_call(roll_call)
        self._notifications.notify("Attendance Closed", "Warden has finalized today's attendance.", Role.STUDENT)
        self._notifications.notify("Attendance Closed", "Daily attendance registry closed.", Role.WORKER)
        logger.info("roll call finalized date=%s by=%s", on_date.isoformat(), closed_by)
        return roll_call

    def is_finalized(self, on_date: date) -> bool:
        return self._attendance.get_roll_call(on_date) is not None

    def history(self, user: User) -> list[dict]:
        if user.role != Role.STUDENT:
            raise AuthorizationError("Attendance history is only available to students")
        return [
            {
                "date": e.on_date.isoformat(),
                "time": e.marked_at.strftime("%I:%M %p") if e.status == AttendanceMark.PRESENT else "-",
                "status": e.status.value,
            }
            for e in self._attendance.list_entries(register_number=user.register_number)
        ]

    def summary(self, *, current_role: Role, on_date: date) -> dict:
        self._require_staff(current_role)
        residents = self._residents()
        present = absent = 0
        for e in self._attendance.list_entries(on_date=on_date):
            if e.register_number not in residents:
                continue
            if e.status == AttendanceMark.PRESENT:
                present += 1
            else:
                absent += 1
        return {
            "date": on_date.isoformat(),
            "total": len(residents),
            "present": present,
            "absent": absent,
            "unmarked": len(residents) - present - absent,
            "finalized": self.is_finalized(on_date),
        }
