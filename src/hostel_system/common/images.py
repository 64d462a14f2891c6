"""Evidence images travel as ``data:<mime>;base64,<payload>`` URLs."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass

from werkzeug.datastructures import FileStorage

from ..core.exceptions import ValidationError

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/webp", "image/gif"}
ALLOWED_DOCUMENT_TYPES = ALLOWED_IMAGE_TYPES | {"application/pdf"}


@dataclass(frozen=True)
class InlineImage:
    mime_type: str
    data: bytes

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{base64.b64encode(self.data).decode('ascii')}"


def parse_data_url(value: str, *, allowed=ALLOWED_IMAGE_TYPES) -> InlineImage:
    if not value or not value.startswith("data:") or ";base64," not in value:
        raise ValidationError("Image must be a base64 data URL")

    header, payload = value[len("data:"):].split(";base64,", 1)
    mime_type = header.strip().lower()
    if mime_type not in allowed:
        raise ValidationError(f"Unsupported file type: {mime_type or '-'}")
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Image data is not valid base64")
    if not data:
        raise ValidationError("Image is empty")
    return InlineImage(mime_type=mime_type, data=data)


def file_to_inline(upload: FileStorage, *, allowed=ALLOWED_IMAGE_TYPES) -> InlineImage:
    mime_type = (upload.mimetype or "").lower()
    if mime_type not in allowed:
        raise ValidationError(f"Unsupported file type: {mime_type or '-'}")
    data = upload.read()
    if not data:
        raise ValidationError("Uploaded file is empty")
    return InlineImage(mime_type=mime_type, data=data)
