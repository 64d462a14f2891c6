"""Demo records loaded into the in-memory store when SEED_MOCK_DATA is on."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from werkzeug.security import generate_password_hash

from ..attendance.model import Resident
from ..attendance.repository import AttendanceRepository
from ..attendance.service import floor_for_room
from ..common.datetime_utils import now_local
from ..complaints.model import Complaint
from ..complaints.repository import ComplaintRepository
from ..core.enums import Category, ComplaintStatus, Role, Urgency, WorkerAvailability, WorkerStatus
from ..users.model import User
from ..users.repository import UserRepository

logger = logging.getLogger(__name__)

# (register_number, name, role, room, phone, dob, password, work_category)
DEMO_USERS = [
    ("ADMIN", "System Admin", Role.ADMIN, "SERVER", "000", "1990-01-01", "root", None),
    ("WARDEN-01", "Mr. Sharma", Role.WARDEN, "OFFICE", "999", "1980-01-01", "admin", None),
    ("WORKER-01", "Ramesh", Role.WORKER, "MAINT", "888", "1985-01-01", "work", "Electrical"),
    ("123456789", "Arjun Reddy", Role.STUDENT, "302-A", "777", "2000-01-01", "1234", None),
]

EXTRA_WORKERS = [
    ("WORKER-02", "Suresh", "Plumbing"),
    ("WORKER-03", "Mukesh", "Cleaning"),
]

ROLL_CALL_RESIDENTS = {
    "101": [
        "A. Reddy", "V. Singh", "R. Dravid", "S. Tend", "M. Dhoni", "V. Kohli",
        "R. Sharma", "K. Rahul", "H. Pandya", "R. Jadeja", "J. Bumrah", "M. Shami",
    ],
    "102": ["S. Gill", "S. Iyer", "I. Kishan", "S. Yadav"],
    "103": ["R. Ashwin", "A. Patel", "S. Thakur"],
}


def _add_user(users: UserRepository, user: User) -> None:
    if users.get_by_id(user.register_number) is None:
        users.add(user)


def seed_users(users: UserRepository) -> None:
    for reg, name, role, room, phone, dob, password, category in DEMO_USERS:
        _add_user(
            users,
            User(
                register_number=reg,
                name=name,
                role=role,
                room_number=room,
                phone_number=phone,
                password_hash=generate_password_hash(password),
                dob=dob,
                work_category=category,
                current_status=WorkerAvailability.FREE if role == Role.WORKER else None,
            ),
        )

    for reg, name, category in EXTRA_WORKERS:
        _add_user(
            users,
            User(
                register_number=reg,
                name=name,
                role=Role.WORKER,
                room_number="MAINT",
                phone_number="888",
                password_hash=generate_password_hash("work"),
                work_category=category,
                current_status=WorkerAvailability.FREE,
            ),
        )


def seed_residents(attendance: AttendanceRepository) -> None:
    n = 0
    for room, names in ROLL_CALL_RESIDENTS.items():
        for name in names:
            n += 1
            attendance.add_resident(
                Resident(register_number=f"REG-23-{n:03d}", name=name, room=room, floor=floor_for_room(room))
            )


def seed_complaints(complaints: ComplaintRepository, *, now: Optional[datetime] = None) -> None:
    now = now or now_local()
    submitted = now - timedelta(days=5)
    complaints.add(
        Complaint(
            complaint_id="123456789-302A-1",
            student_id="123456789",
            student_name="Arjun Reddy",
            student_room="302-A",
            title="BROKEN REGULATOR",
            description="The fan regulator in room 101 is not working at all.",
            clean_description="The ceiling fan regulator in Room 101 is unresponsive and needs replacement.",
            images=("https://images.unsplash.com/photo-1621905251189-08b45d6a269e?w=800&q=80",),
            category=Category.ELECTRICAL,
            urgency=Urgency.MEDIUM,
            status=ComplaintStatus.COMPLETED,
            submitted_at=submitted,
            worker_status=WorkerStatus.COMPLETED,
            start_date=submitted.date(),
            completed_at=submitted + timedelta(days=1),
            assigned_worker="Ramesh (Electrician)",
            assigned_worker_id="WORKER-01",
        )
    )


def load_mock_data(
    *,
    users: UserRepository,
    complaints: ComplaintRepository,
    attendance: AttendanceRepository,
) -> None:
    seed_users(users)
    seed_residents(attendance)
    seed_complaints(complaints)
    logger.info("mock data loaded users=%s", len(users.list_all()))
