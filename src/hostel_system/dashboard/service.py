from __future__ import annotations

from collections import Counter

from ..complaints.repository import ComplaintRepository
from ..complaints.service import ComplaintService
from ..core.enums import ComplaintStatus, DisciplinaryStatus, Role
from ..core.exceptions import AuthorizationError
from ..disciplinary.repository import DisciplinaryRepository
from ..leaves.repository import LeaveRepository
from ..users.model import User
from ..users.repository import UserRepository


class DashboardService:
    """Read-only aggregates for the role dashboards."""

    def __init__(
        self,
        complaints: ComplaintService,
        complaint_repo: ComplaintRepository,
        users: UserRepository,
        leaves: LeaveRepository,
        disciplinary: DisciplinaryRepository,
    ):
        self._complaints = complaints
        self._complaint_repo = complaint_repo
        self._users = users
        self._leaves = leaves
        self._disciplinary = disciplinary

    def stats_for(self, user: User) -> dict:
        visible = self._complaints.list_for(user)
        completed = sum(1 for c in visible if c.status == ComplaintStatus.COMPLETED)
        pending = sum(
            1 for c in visible if c.status not in {ComplaintStatus.COMPLETED, ComplaintStatus.REJECTED}
        )
        return {"total": len(visible), "completed": completed, "pending": pending}

    def worker_performance(self, *, current_role: Role) -> list[dict]:
        if current_role not in {Role.WARDEN, Role.ADMIN}:
            raise AuthorizationError("You do not have permission")

        rows = []
        for worker in self._users.list_all(role=Role.WORKER):
            tasks = self._complaint_repo.list_all(worker_id=worker.register_number)
            done = sum(1 for c in tasks if c.status == ComplaintStatus.COMPLETED)
            efficiency = round(done / len(tasks) * 100) if tasks else 100
            rows.append(
                {
                    "register_number": worker.register_number,
                    "name": worker.name,
                    "work_category": worker.work_category,
                    "assigned": len(tasks),
                    "completed": done,
                    "efficiency": efficiency,
                    "availability": worker.current_status.value if worker.current_status else None,
                }
            )
        rows.sort(key=lambda r: (-r["efficiency"], r["name"]))
        return rows

    def admin_overview(self, *, current_role: Role) -> dict:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        complaints = self._complaint_repo.list_all()
        users = Counter(u.role.value for u in self._users.list_all())
        return {
            "users": {role.value: users.get(role.value, 0) for role in Role},
            "complaints_by_status": {s.value: n for s, n in Counter(c.status for c in complaints).items()},
            "complaints_by_category": {k.value: n for k, n in Counter(c.category for c in complaints).items()},
            "leaves_by_status": {s.value: n for s, n in Counter(r.status for r in self._leaves.list_all()).items()},
            "open_disciplinary_reports": len(self._disciplinary.list_all(status=DisciplinaryStatus.REPORTED)),
            "flagged_complaints": sum(1 for c in complaints if c.admin_flagged),
        }
