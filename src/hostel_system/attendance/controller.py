from __future__ import annotations

from datetime import date

from flask import Flask, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.web import body, current_role, current_user_id, login_required, ok, roles_required
from ..container import Container
from ..core.enums import Role
from .service import FLOORS


def _day(value) -> date:
    return parse_iso_date(value) if value else now_local().date()


def register(app: Flask, container: Container) -> None:
    attendance = container.attendance_service

    @app.route("/api/attendance/floors", endpoint="attendance_floors")
    @roles_required(Role.WARDEN, Role.ADMIN)
    def attendance_floors():
        return ok(floors=FLOORS, rooms=attendance.rooms(floor=request.args.get("floor") or None))

    @app.route("/api/attendance/roster", endpoint="attendance_roster")
    @roles_required(Role.WARDEN, Role.ADMIN)
    def attendance_roster():
        on_date = _day(request.args.get("date"))
        rows = attendance.roster(
            current_role=current_role(),
            on_date=on_date,
            room=request.args.get("room") or None,
            floor=request.args.get("floor") or None,
        )
        return ok(date=on_date.isoformat(), finalized=attendance.is_finalized(on_date), residents=rows)

    @app.route("/api/attendance/mark", methods=["POST"], endpoint="attendance_mark")
    @roles_required(Role.WARDEN, Role.ADMIN)
    def attendance_mark():
        data = body()
        entry = attendance.mark(
            current_role=current_role(),
            marked_by=current_user_id(),
            register_number=data.get("register_number", ""),
            status=data.get("status"),
            on_date=_day(data.get("date")),
        )
        return ok(register_number=entry.register_number, status=entry.status.value, date=entry.on_date.isoformat())

    @app.route("/api/attendance/finalize", methods=["POST"], endpoint="attendance_finalize")
    @roles_required(Role.WARDEN, Role.ADMIN)
    def attendance_finalize():
        roll_call = attendance.finalize(
            current_role=current_role(),
            closed_by=current_user_id(),
            on_date=_day(body().get("date")),
        )
        return ok(date=roll_call.on_date.isoformat(), message="Attendance finalized")

    @app.route("/api/attendance/summary", endpoint="attendance_summary")
    @roles_required(Role.WARDEN, Role.ADMIN)
    def attendance_summary():
        return ok(summary=attendance.summary(current_role=current_role(), on_date=_day(request.args.get("date"))))

    @app.route("/api/attendance/history", endpoint="attendance_history")
    @login_required
    def attendance_history():
        me = container.user_service.get(current_user_id())
        return ok(history=attendance.history(me))
