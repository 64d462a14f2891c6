"""Shared pieces of the JSON controllers: session guards, body parsing, error mapping."""

from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Optional

from flask import Flask, current_app, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    ModerationUnavailableError,
    NotFoundError,
    ValidationError,
)
from .datetime_utils import parse_iso_date
from .images import ALLOWED_IMAGE_TYPES, file_to_inline

logger = logging.getLogger(__name__)

SESSION_KEY = "register_number"


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def ok(**payload):
    return jsonify({"success": True, **payload})


def _session_error():
    """401 response when there is no usable login, else None."""
    if SESSION_KEY not in session:
        return fail("Please log in to continue", 401)
    auth = current_app.extensions["hostel_container"].auth_service
    if not auth.session_is_valid(session[SESSION_KEY]):
        logger.info("session revoked id=%s", session[SESSION_KEY])
        session.clear()
        return fail("Your session is no longer valid. Please log in again.", 401)
    return None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        error = _session_error()
        if error is not None:
            return error
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            error = _session_error()
            if error is not None:
                return error
            if session.get("role") not in allowed:
                return fail("You do not have permission", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def current_role() -> Role:
    return Role(session["role"])


def current_user_id() -> str:
    return session[SESSION_KEY]


def body() -> dict:
    """JSON body, or the form fields of a multipart upload."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def _text(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value


def date_field(data: dict, key: str) -> Optional[date]:
    value = _text(data, key).strip()
    return parse_iso_date(value) if value else None


def image_field(data: dict, key: str, *, allowed=ALLOWED_IMAGE_TYPES) -> Optional[str]:
    """A data URL from the JSON body, or an uploaded file converted to one."""
    upload = request.files.get(key)
    if upload is not None and upload.filename:
        return file_to_inline(upload, allowed=allowed).to_data_url()
    return _text(data, key) or None


def image_list(data: dict, key: str) -> list[str]:
    uploads = [f for f in request.files.getlist(key) if f.filename]
    if uploads:
        return [file_to_inline(f).to_data_url() for f in uploads]
    value = data.get(key) or []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValidationError(f"{key} must be a list of image data URLs")
    return value


def status_for(error: DomainError) -> int:
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, AuthenticationError):
        return 401
    if isinstance(error, AuthorizationError):
        return 403
    if isinstance(error, ModerationUnavailableError):
        return 503
    return 500


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = status_for(e)
        if status == 503:
            logger.warning("moderation unavailable path=%s: %s", request.path, e)
            return fail("Content check service is unavailable. Please try again later.", 503)
        return fail(str(e), status)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return fail(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("unhandled error path=%s", request.path)
        if app.config.get("DEBUG", False):
            return fail(f"System error: {e}", 500)
        return fail("System error", 500)
