from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.images import InlineImage
from ..core.enums import Category, EvidenceStage, Urgency
from ..core.exceptions import ModerationUnavailableError
from .gateway import ContentModerator
from .model import ComplaintAnalysis, ExtensionVerdict, ImageVerdict, ModerationVerdict
from .text import make_title, normalize_text

logger = logging.getLogger(__name__)


class ModerationService:
    """Applies a single failure policy to every moderation call.

    fail_open=False: an unavailable service surfaces as
    ``ModerationUnavailableError`` and the caller's action is refused.
    fail_open=True: permissive verdicts are returned and a warning is logged.
    """

    def __init__(self, moderator: ContentModerator, *, fail_open: bool = False):
        self._moderator = moderator
        self._fail_open = bool(fail_open)

    @property
    def fail_open(self) -> bool:
        return self._fail_open

    def close(self) -> None:
        """Release the backend's connections, if it holds any."""
        close = getattr(self._moderator, "close", None)
        if close is not None:
            close()

    def _unavailable(self, operation: str, error: ModerationUnavailableError) -> None:
        if not self._fail_open:
            raise error
        logger.warning("moderation %s unavailable, failing open: %s", operation, error)

    def analyze_complaint(
        self,
        text: str,
        images: Sequence[InlineImage],
        category_hint: Optional[str] = None,
    ) -> ComplaintAnalysis:
        try:
            return self._moderator.analyze_complaint(text, images, category_hint)
        except ModerationUnavailableError as e:
            self._unavailable("analyze_complaint", e)

        category = Category(category_hint) if category_hint in {c.value for c in Category} else Category.OTHER
        return ComplaintAnalysis(
            is_safe=True,
            matches_description=True,
            clean_description=normalize_text(text),
            title=make_title(text),
            category=category,
            urgency=Urgency.MEDIUM,
        )

    def moderate_text(self, text: str) -> ModerationVerdict:
        try:
            return self._moderator.moderate_text(text)
        except ModerationUnavailableError as e:
            self._unavailable("moderate_text", e)
        return ModerationVerdict(approved=True, clean_text=text)

    def validate_extension_reason(self, reason: str) -> ExtensionVerdict:
        try:
            return self._moderator.validate_extension_reason(reason)
        except ModerationUnavailableError as e:
            self._unavailable("validate_extension_reason", e)
        # Unverified reasons still go to the admin queue.
        return ExtensionVerdict(is_valid=True, flag_for_admin=True)

    def validate_worker_evidence(self, image: InlineImage, stage: EvidenceStage, issue_context: str) -> ImageVerdict:
        try:
            return self._moderator.validate_worker_evidence(image, stage, issue_context)
        except ModerationUnavailableError as e:
            self._unavailable("validate_worker_evidence", e)
        return ImageVerdict(is_valid=True, reason="System check unavailable, proceeding.")

    def validate_document(self, image: InlineImage, name: str, register_number: str) -> ImageVerdict:
        try:
            return self._moderator.validate_document(image, name, register_number)
        except ModerationUnavailableError as e:
            self._unavailable("validate_document", e)
        return ImageVerdict(is_valid=True, reason="System check unavailable, proceeding.")
