from __future__ import annotations

import logging
from typing import Optional, Sequence

import httpx

from ..common.images import InlineImage
from ..core.enums import Category, EvidenceStage, Urgency
from ..core.exceptions import ModerationUnavailableError
from .gateway import ContentModerator
from .model import ComplaintAnalysis, ExtensionVerdict, ImageVerdict, ModerationVerdict

logger = logging.getLogger(__name__)


class HttpModerator(ContentModerator):
    """Client for a hosted moderation service speaking JSON over HTTP.

    Each call POSTs to ``<base_url>/<operation>`` and expects a JSON verdict
    object with camelCase keys (``isSafe``, ``cleanText``, ...).
    """

    def __init__(
        self,
        base_url: str,
        *,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def _post(self, operation: str, payload: dict) -> dict:
        try:
            response = self._client.post(f"/{operation}", json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning("moderation %s HTTP error: %s", operation, e.response.status_code)
            raise ModerationUnavailableError(f"Moderation service error: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.warning("moderation %s transport error: %s", operation, e)
            raise ModerationUnavailableError("Moderation service unavailable") from e
        except ValueError as e:
            logger.warning("moderation %s returned invalid JSON", operation)
            raise ModerationUnavailableError("Moderation service returned an invalid response") from e

        if not isinstance(data, dict):
            raise ModerationUnavailableError("Moderation service returned an invalid response")
        return data

    def analyze_complaint(
        self,
        text: str,
        images: Sequence[InlineImage],
        category_hint: Optional[str] = None,
    ) -> ComplaintAnalysis:
        data = self._post(
            "analyze-complaint",
            {
                "text": text,
                "categoryHint": category_hint,
                "images": [i.to_data_url() for i in images],
            },
        )
        try:
            return ComplaintAnalysis(
                is_safe=bool(data["isSafe"]),
                matches_description=bool(data["matchesDescription"]),
                clean_description=str(data["cleanDescription"]),
                title=str(data["title"]),
                category=Category(data["category"]),
                urgency=Urgency(data["urgency"]),
                rejection_reason=data.get("rejectionReason"),
            )
        except (KeyError, ValueError) as e:
            raise ModerationUnavailableError("Moderation service returned an incomplete analysis") from e

    def moderate_text(self, text: str) -> ModerationVerdict:
        data = self._post("moderate", {"text": text})
        if "approved" not in data:
            raise ModerationUnavailableError("Moderation service returned an incomplete verdict")
        return ModerationVerdict(
            approved=bool(data["approved"]),
            clean_text=str(data.get("cleanText") or text),
            reason=data.get("reason"),
        )

    def validate_extension_reason(self, reason: str) -> ExtensionVerdict:
        data = self._post("validate-extension", {"reason": reason})
        return ExtensionVerdict(
            is_valid=bool(data.get("isValid", False)),
            flag_for_admin=bool(data.get("flagForAdmin", True)),
        )

    def validate_worker_evidence(self, image: InlineImage, stage: EvidenceStage, issue_context: str) -> ImageVerdict:
        data = self._post(
            "validate-evidence",
            {"image": image.to_data_url(), "stage": stage.value, "issue": issue_context},
        )
        return ImageVerdict(is_valid=bool(data.get("isValid", False)), reason=data.get("reason"))

    def validate_document(self, image: InlineImage, name: str, register_number: str) -> ImageVerdict:
        data = self._post(
            "validate-document",
            {"image": image.to_data_url(), "name": name, "registerNumber": register_number},
        )
        return ImageVerdict(is_valid=bool(data.get("isValid", False)), reason=data.get("reason"))
