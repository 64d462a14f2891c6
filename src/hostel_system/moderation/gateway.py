from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..common.images import InlineImage
from ..core.enums import EvidenceStage
from .model import ComplaintAnalysis, ExtensionVerdict, ImageVerdict, ModerationVerdict


class ContentModerator(Protocol):
    """Port to the external moderation / vision service.

    Implementations raise ``ModerationUnavailableError`` when the service
    cannot produce a verdict; they never decide the failure policy.
    """

    def analyze_complaint(
        self,
        text: str,
        images: Sequence[InlineImage],
        category_hint: Optional[str] = None,
    ) -> ComplaintAnalysis:
        raise NotImplementedError

    def moderate_text(self, text: str) -> ModerationVerdict:
        raise NotImplementedError

    def validate_extension_reason(self, reason: str) -> ExtensionVerdict:
        raise NotImplementedError

    def validate_worker_evidence(self, image: InlineImage, stage: EvidenceStage, issue_context: str) -> ImageVerdict:
        raise NotImplementedError

    def validate_document(self, image: InlineImage, name: str, register_number: str) -> ImageVerdict:
        raise NotImplementedError
