from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Category, Urgency


@dataclass(frozen=True)
class ComplaintAnalysis:
    is_safe: bool
    matches_description: bool
    clean_description: str
    title: str
    category: Category
    urgency: Urgency
    rejection_reason: Optional[str] = None


@dataclass(frozen=True)
class ModerationVerdict:
    approved: bool
    clean_text: str
    reason: Optional[str] = None


@dataclass(frozen=True)
class ExtensionVerdict:
    is_valid: bool
    flag_for_admin: bool


@dataclass(frozen=True)
class ImageVerdict:
    is_valid: bool
    reason: Optional[str] = None
