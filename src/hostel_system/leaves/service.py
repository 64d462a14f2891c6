from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import date
from typing import Optional

from ..common.datetime_utils import now_local, parse_optional_time
from ..common.images import ALLOWED_DOCUMENT_TYPES, parse_data_url
from ..common.validators import require_non_empty
from ..core.enums import RequestStatus, Role
from ..core.exceptions import AuthorizationError, ContentRejectedError, NotFoundError, ValidationError
from ..moderation.service import ModerationService
from ..notifications.service import NotificationService
from ..users.model import User
from . import gate_pass as gate_pass_render
from .model import GatePass, LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)

APPLICANT_ROLES = {Role.STUDENT, Role.WORKER, Role.WARDEN}


class LeaveService:
    def __init__(
        self,
        leaves: LeaveRepository,
        moderation: ModerationService,
        notifications: NotificationService,
        *,
        gate_pass_secret: str,
    ):
        self._leaves = leaves
        self._moderation = moderation
        self._notifications = notifications
        self._secret = gate_pass_secret

    def _get(self, request_id: str) -> LeaveRequest:
        req = self._leaves.get(request_id)
        if not req:
            raise NotFoundError("Leave request not found")
        return req

    def create(
        self,
        *,
        user: User,
        from_date: Optional[date],
        to_date: Optional[date],
        reason: str,
        time_out: str = "",
        time_in: str = "",
        mentor_proof: Optional[str] = None,
    ) -> LeaveRequest:
        if user.role not in APPLICANT_ROLES:
            raise AuthorizationError("You do not have permission")
        if not from_date or not to_date:
            raise ValidationError("From and to dates are required")
        if to_date < from_date:
            raise ValidationError("End date must be on or after start date")
        reason = require_non_empty(reason, "Reason")

        out_t = parse_optional_time(time_out)
        in_t = parse_optional_time(time_in)
        proof = None
        if user.role == Role.STUDENT:
            if not out_t or not in_t or not mentor_proof:
                raise ValidationError("Please fill all fields and upload mentor proof.")
            if from_date == to_date and in_t <= out_t:
                raise ValidationError("Time in must be after time out")
            proof = parse_data_url(mentor_proof, allowed=ALLOWED_DOCUMENT_TYPES)

        verdict = self._moderation.moderate_text(reason)
        if not verdict.approved:
            logger.warning("leave reason rejected user=%s", user.register_number)
            raise ContentRejectedError(verdict.reason or "Invalid reason provided.", verdict.reason)

        if proof is not None:
            doc = self._moderation.validate_document(proof, user.name, user.register_number)
            if not doc.is_valid:
                raise ContentRejectedError(doc.reason or "Mentor approval document could not be verified.", doc.reason)

        req = LeaveRequest(
            request_id=str(uuid.uuid4()),
            user_id=user.register_number,
            user_name=user.name,
            user_role=user.role,
            from_date=from_date,
            to_date=to_date,
            reason=verdict.clean_text,
            status=RequestStatus.PENDING,
            created_at=now_local(),
            time_out=out_t,
            time_in=in_t,
            mentor_proof=proof.to_data_url() if proof else None,
            room_number=user.room_number,
            phone=user.phone_number,
            address=user.address,
            father_name=user.father_name,
        )
        self._leaves.add(req)
        approver = Role.ADMIN if user.role == Role.WARDEN else Role.WARDEN
        self._notifications.notify("Leave Request", f"New leave request from {user.name}", approver)
        logger.info("leave created id=%s user=%s", req.request_id, user.register_number)
        return req

    def list_visible(self, user: User) -> list[LeaveRequest]:
        if user.role in {Role.STUDENT, Role.WORKER}:
            return list(self._leaves.list_all(user_id=user.register_number))
        if user.role == Role.WARDEN:
            return [r for r in self._leaves.list_all() if r.user_role != Role.ADMIN]
        return list(self._leaves.list_all())

    @staticmethod
    def can_decide(decider: User, req: LeaveRequest) -> bool:
        if decider.role == Role.ADMIN:
            return True
        return decider.role == Role.WARDEN and req.user_role in {Role.STUDENT, Role.WORKER}

    def _decide(self, *, decider: User, request_id: str, status: RequestStatus) -> LeaveRequest:
        req = self._get(request_id)
        if not self.can_decide(decider, req):
            raise AuthorizationError("You do not have permission")
        if req.status != RequestStatus.PENDING:
            raise ValidationError("Request has already been processed")

        updated = replace(req, status=status, decided_by=decider.register_number, decided_at=now_local())
        self._leaves.save(updated)
        self._notifications.notify(
            "Leave Update",
            f"Leave request of {req.user_name} ({req.from_date.isoformat()} - {req.to_date.isoformat()}) "
            f"was {status.value.lower()}.",
            req.user_role,
        )
        logger.info("leave %s id=%s by=%s", status.value.lower(), request_id, decider.register_number)
        return updated

    def approve(self, *, decider: User, request_id: str) -> LeaveRequest:
        return self._decide(decider=decider, request_id=request_id, status=RequestStatus.APPROVED)

    def reject(self, *, decider: User, request_id: str) -> LeaveRequest:
        return self._decide(decider=decider, request_id=request_id, status=RequestStatus.REJECTED)

    def gate_pass(self, *, user: User, request_id: str) -> GatePass:
        req = self._get(request_id)
        if user.role != Role.STUDENT or req.user_id != user.register_number:
            raise AuthorizationError("Gate passes are only available to the requesting student")
        if req.status != RequestStatus.APPROVED:
            raise ValidationError("Gate pass is only available for approved requests")

        if not req.gate_pass_generated:
            req = replace(req, gate_pass_generated=True)
            self._leaves.save(req)

        return GatePass(
            request_id=req.request_id,
            holder_id=req.user_id,
            holder_name=req.user_name,
            room_number=req.room_number,
            phone=req.phone,
            address=req.address,
            father_name=req.father_name,
            from_date=req.from_date,
            to_date=req.to_date,
            time_out=req.time_out,
            time_in=req.time_in,
            reason=req.reason,
            approved_by=req.decided_by,
            approved_at=req.decided_at,
            verification_code=gate_pass_render.verification_code(req, self._secret),
        )

    def gate_pass_qr_png(self, *, user: User, request_id: str):
        return gate_pass_render.render_qr_png(self.gate_pass(user=user, request_id=request_id))

    def verify_gate_pass(self, *, current_role: Role, request_id: str, code: str) -> bool:
        if current_role not in {Role.WARDEN, Role.ADMIN}:
            raise AuthorizationError("You do not have permission")
        req = self._get(request_id)
        return req.status == RequestStatus.APPROVED and gate_pass_render.verify_code(req, self._secret, code)

    @staticmethod
    def to_row(req: LeaveRequest) -> dict:
        return {
            "id": req.request_id,
            "user_id": req.user_id,
            "user_name": req.user_name,
            "user_role": req.user_role.value,
            "from_date": req.from_date.isoformat(),
            "to_date": req.to_date.isoformat(),
            "reason": req.reason,
            "status": req.status.value,
            "created_at": req.created_at.isoformat(),
            "decided_by": req.decided_by,
            "decided_at": req.decided_at.isoformat() if req.decided_at else None,
            "time_out": req.time_out.strftime("%H:%M") if req.time_out else None,
            "time_in": req.time_in.strftime("%H:%M") if req.time_in else None,
            "has_mentor_proof": req.mentor_proof is not None,
            "gate_pass_generated": req.gate_pass_generated,
        }

    @staticmethod
    def gate_pass_to_row(gp: GatePass) -> dict:
        return {
            "request_id": gp.request_id,
            "holder_id": gp.holder_id,
            "holder_name": gp.holder_name,
            "room_number": gp.room_number,
            "phone": gp.phone,
            "address": gp.address,
            "father_name": gp.father_name,
            "from_date": gp.from_date.isoformat(),
            "to_date": gp.to_date.isoformat(),
            "time_out": gp.time_out.strftime("%H:%M") if gp.time_out else None,
            "time_in": gp.time_in.strftime("%H:%M") if gp.time_in else None,
            "reason": gp.reason,
            "approved_by": gp.approved_by,
            "approved_at": gp.approved_at.isoformat() if gp.approved_at else None,
            "verification_code": gp.verification_code,
            "status": "APPROVED",
        }
