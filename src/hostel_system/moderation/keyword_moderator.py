"""Offline moderator used with mock data and in tests.

Deterministic stand-in for the hosted model: word lists for profanity,
category and urgency, and file signature checks for "real photo" tests.
"""

from __future__ import annotations

import re
from typing import Optional, Sequence

from ..common.images import InlineImage
from ..core.enums import Category, EvidenceStage, Urgency
from .gateway import ContentModerator
from .model import ComplaintAnalysis, ExtensionVerdict, ImageVerdict, ModerationVerdict
from .text import make_title, normalize_text

BLOCKED_WORDS = {
    "bastard",
    "bloody",
    "crap",
    "damn",
    "fuck",
    "idiot",
    "moron",
    "shit",
    "stupid",
    "useless",
}

CATEGORY_KEYWORDS: dict[Category, tuple[str, ...]] = {
    Category.AC: ("ac", "air conditioner", "cooling", "aircon"),
    Category.ELECTRICAL: ("fan", "light", "bulb", "switch", "socket", "regulator", "power", "wire", "electric"),
    Category.FURNITURE: ("chair", "table", "bed", "cupboard", "door", "window", "desk", "shelf"),
    Category.CLEANING: ("dirty", "clean", "garbage", "dust", "smell", "trash", "washroom"),
    Category.WIFI: ("wifi", "wi-fi", "internet", "network", "router"),
    Category.PLUMBING: ("tap", "pipe", "leak", "drain", "flush", "toilet", "sink", "shower"),
    Category.WATER_SUPPLY: ("no water", "water supply", "water tank", "drinking water", "hot water"),
}

URGENCY_KEYWORDS: tuple[tuple[Urgency, tuple[str, ...]], ...] = (
    (Urgency.CRITICAL, ("fire", "spark", "shock", "smoke", "flood", "gas", "burning")),
    (Urgency.HIGH, ("no water", "not working", "burst", "broken", "leak", "dead")),
    (Urgency.LOW, ("minor", "slow", "loose", "small", "squeak")),
)

VALID_EXTENSION_WORDS = ("part", "parts", "sick", "ill", "access", "locked", "supplier", "delivery", "vendor", "weather")
INVALID_EXTENSION_WORDS = ("forgot", "lazy", "no reason", "didn't feel", "later", "busy")

_SIGNATURES: dict[str, tuple[bytes, ...]] = {
    "image/png": (b"\x89PNG\r\n\x1a\n",),
    "image/jpeg": (b"\xff\xd8\xff",),
    "image/gif": (b"GIF87a", b"GIF89a"),
    "application/pdf": (b"%PDF",),
}


def _contains(text: str, phrase: str) -> bool:
    return re.search(rf"\b{re.escape(phrase)}\b", text) is not None


def _blocked_words(text: str) -> list[str]:
    lowered = (text or "").lower()
    return sorted(w for w in BLOCKED_WORDS if _contains(lowered, w))


def _looks_real(image: InlineImage) -> bool:
    if image.mime_type == "image/webp":
        return image.data[:4] == b"RIFF" and image.data[8:12] == b"WEBP"
    signatures = _SIGNATURES.get(image.mime_type)
    if not signatures:
        return False
    return any(image.data.startswith(sig) for sig in signatures)


class KeywordModerator(ContentModerator):
    def analyze_complaint(
        self,
        text: str,
        images: Sequence[InlineImage],
        category_hint: Optional[str] = None,
    ) -> ComplaintAnalysis:
        blocked = _blocked_words(text)
        category = self._categorize(text, category_hint)
        urgency = self._urgency(text)

        matches = bool(images) and all(_looks_real(i) for i in images)
        reason = None
        if blocked:
            reason = "Abusive language detected."
        elif not matches:
            reason = "Image appears to be downloaded from internet or synthetic. Please upload a real camera photo."

        return ComplaintAnalysis(
            is_safe=not blocked,
            matches_description=matches,
            clean_description=normalize_text(text),
            title=make_title(text),
            category=category,
            urgency=urgency,
            rejection_reason=reason,
        )

    def moderate_text(self, text: str) -> ModerationVerdict:
        blocked = _blocked_words(text)
        if blocked:
            return ModerationVerdict(approved=False, clean_text=text, reason="Improper words detected.")
        return ModerationVerdict(approved=True, clean_text=normalize_text(text))

    def validate_extension_reason(self, reason: str) -> ExtensionVerdict:
        lowered = (reason or "").lower()
        valid = any(_contains(lowered, w) for w in VALID_EXTENSION_WORDS)
        invalid = any(_contains(lowered, w) for w in INVALID_EXTENSION_WORDS)
        ok = valid and not invalid
        return ExtensionVerdict(is_valid=ok, flag_for_admin=not ok)

    def validate_worker_evidence(self, image: InlineImage, stage: EvidenceStage, issue_context: str) -> ImageVerdict:
        if not _looks_real(image):
            return ImageVerdict(is_valid=False, reason=f"Proof for '{stage.value}' is not a real camera photo.")
        return ImageVerdict(is_valid=True)

    def validate_document(self, image: InlineImage, name: str, register_number: str) -> ImageVerdict:
        if not _looks_real(image):
            return ImageVerdict(is_valid=False, reason="Document does not look like a real photo or scan.")
        return ImageVerdict(is_valid=True)

    @staticmethod
    def _categorize(text: str, hint: Optional[str]) -> Category:
        if hint and hint in {c.value for c in Category} and hint != Category.OTHER.value:
            return Category(hint)

        lowered = (text or "").lower()
        # Multi-word water phrases win over the generic plumbing words.
        for cat in (Category.WATER_SUPPLY, Category.AC, Category.WIFI, Category.PLUMBING,
                    Category.ELECTRICAL, Category.FURNITURE, Category.CLEANING):
            if any(_contains(lowered, k) for k in CATEGORY_KEYWORDS[cat]):
                return cat
        return Category.OTHER

    @staticmethod
    def _urgency(text: str) -> Urgency:
        lowered = (text or "").lower()
        for urgency, words in URGENCY_KEYWORDS:
            if any(_contains(lowered, w) for w in words):
                return urgency
        return Urgency.MEDIUM
