from __future__ import annotations

import hashlib
import hmac
import io

import qrcode

from .model import GatePass, LeaveRequest


def verification_code(req: LeaveRequest, secret: str) -> str:
    """Short HMAC over the fields a guard checks at the gate."""
    message = f"{req.request_id}|{req.user_id}|{req.from_date.isoformat()}|{req.to_date.isoformat()}"
    digest = hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()
    return digest[:12].upper()


def verify_code(req: LeaveRequest, secret: str, code: str) -> bool:
    return hmac.compare_digest(verification_code(req, secret), (code or "").strip().upper())


def qr_payload(gate_pass: GatePass) -> str:
    return f"GATEPASS:{gate_pass.request_id}:{gate_pass.holder_id}:{gate_pass.verification_code}"


def render_qr_png(gate_pass: GatePass) -> io.BytesIO:
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=8,
        border=2,
    )
    qr.add_data(qr_payload(gate_pass))
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return buf
