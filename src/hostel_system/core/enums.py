from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for permission checks."""

    STUDENT = "student"
    WARDEN = "warden"
    WORKER = "worker"
    ADMIN = "admin"


class ComplaintStatus(str, Enum):
    """Main complaint lifecycle status."""

    SUBMITTED = "Submitted"
    APPROVED = "Approved"
    ASSIGNED = "Assigned"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    REJECTED = "Rejected"


class WorkerStatus(str, Enum):
    """Worker-side progress on an assigned complaint."""

    ASSIGNED = "Assigned"
    ACCEPTED = "Accepted"
    REJECTED_BY_WORKER = "Rejected by Worker"
    REACHED = "Reached Location"
    CHECKING = "Checking Issue"
    REPAIRING = "Repairing"
    WAITING = "Waiting for Parts"
    COMPLETED = "Job Completed"


class Category(str, Enum):
    AC = "AC"
    ELECTRICAL = "Electrical"
    FURNITURE = "Furniture"
    CLEANING = "Cleaning"
    WIFI = "Wifi"
    PLUMBING = "Plumbing"
    WATER_SUPPLY = "Water Supply"
    OTHER = "Other"


class Urgency(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class RequestStatus(str, Enum):
    """Approval workflow status (leave, onboarding, profile changes)."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class WorkerAvailability(str, Enum):
    FREE = "Free"
    BUSY = "Busy"
    UNAVAILABLE = "Unavailable"
    WORKING = "Working"


class EvidenceStage(str, Enum):
    REACHED = "reached"
    WORKING = "working"
    COMPLETED = "completed"


class PartsStatus(str, Enum):
    REQUESTED = "requested"
    ORDERED = "ordered"
    RECEIVED = "received"


class Audience(str, Enum):
    ALL = "all"
    STUDENT = "student"
    WORKER = "worker"


class Reaction(str, Enum):
    THUMBS_UP = "thumbsUp"
    THUMBS_DOWN = "thumbsDown"


class ProfileChangeType(str, Enum):
    PASSWORD_CHANGE = "Password Change"
    DETAILS_UPDATE = "Details Update"


class DisciplinaryStatus(str, Enum):
    REPORTED = "Reported"
    ACTION_TAKEN = "Action Taken"
    DISMISSED = "Dismissed"


class AttendanceMark(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
