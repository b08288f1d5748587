"""
Input Validation for Client Operations.

Validation runs before any network call so that a bad argument never
costs a request (and never burns the vendor's rate limit):
    - Credentials: required, non-blank
    - Model token: required, non-blank, no whitespace or path separators
    - Inference text: required, max 2048 characters
    - Job token: required, safe to place in a URL path
    - Media: bytes-like, non-empty, within the configured size limit

Each validator raises the error kind of the operation it guards
(AuthError, RequestError, UploadError, PollError), so callers only ever
see the documented error hierarchy.
"""
from __future__ import annotations

import re
from typing import Optional, Type

from fakeyou.core.logging import get_logger, warn
from fakeyou.errors import AuthError, FakeYouError, PollError, RequestError, UploadError

_LOG = get_logger("fakeyou.validators")

MAX_INFERENCE_TEXT_CHARS = 2048
MAX_TOKEN_CHARS = 128

# Vendor tokens look like "TM:abc123", "JTINF:xyz", "MU:..."
_TOKEN_RE = re.compile(r"^[A-Za-z0-9_:\-.]+$")


def _require_str(value: object, field: str, error_cls: Type[FakeYouError]) -> None:
    if value is not None and not isinstance(value, str):
        raise error_cls(
            f"{field} must be a string, got {type(value).__name__}",
            details={"field": field},
        )


def validate_credentials(username: Optional[str], password: Optional[str]) -> tuple[str, str]:
    """
    Validate login credentials.

    Raises:
        AuthError: If either value is missing, blank or not a string.
    """
    _require_str(username, "username", AuthError)
    _require_str(password, "password", AuthError)
    if not username or not username.strip():
        raise AuthError("Username or email is required")
    if not password:
        raise AuthError("Password is required")
    return username.strip(), password


def validate_model_token(model_token: Optional[str]) -> str:
    """
    Validate a model (voice) token.

    Raises:
        RequestError: If the token is missing, blank, malformed or not a string.
    """
    _require_str(model_token, "model_token", RequestError)
    if not model_token or not model_token.strip():
        raise RequestError("Model token is required", details={"field": "model_token"})

    model_token = model_token.strip()
    if len(model_token) > MAX_TOKEN_CHARS or not _TOKEN_RE.match(model_token):
        raise RequestError(
            f"Model token is malformed: {model_token[:40]!r}",
            details={"field": "model_token"},
        )
    return model_token


def validate_text(text: Optional[str], max_length: int = MAX_INFERENCE_TEXT_CHARS) -> str:
    """
    Validate inference text.

    Raises:
        RequestError: If text is missing, blank, too long or not a string.
    """
    _require_str(text, "inference_text", RequestError)
    if not text or not text.strip():
        raise RequestError("Inference text is required", details={"field": "inference_text"})

    text = text.strip()
    if len(text) > max_length:
        raise RequestError(
            f"Inference text exceeds maximum length ({len(text)} > {max_length})",
            details={"field": "inference_text", "length": len(text)},
        )
    return text


def validate_job_token(job_token: Optional[str]) -> str:
    """
    Validate a job token before it is placed in a status URL.

    Raises:
        PollError: If the token is missing, not a string, or could alter the URL path.
    """
    _require_str(job_token, "job_token", PollError)
    if not job_token or not job_token.strip():
        raise PollError("Job token is required")

    job_token = job_token.strip()
    if len(job_token) > MAX_TOKEN_CHARS or not _TOKEN_RE.match(job_token):
        raise PollError(f"Job token is malformed: {job_token[:40]!r}", details={"job_token": job_token[:40]})
    return job_token


def validate_media(data: object, kind: str, max_bytes: int) -> bytes:
    """
    Validate raw media for upload.

    Args:
        data: bytes, bytearray or memoryview.
        kind: "image" or "audio", used in messages.
        max_bytes: Size limit from UploadsConfig.

    Returns:
        The media as bytes.

    Raises:
        UploadError: If data is not bytes-like, empty or too large.
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise UploadError(
            f"{kind} must be bytes, got {type(data).__name__}",
            details={"kind": kind},
        )

    payload = bytes(data)
    if not payload:
        raise UploadError(f"{kind} is empty", details={"kind": kind})

    if len(payload) > max_bytes:
        warn(_LOG, "media_too_large", kind=kind, size=len(payload), limit=max_bytes)
        raise UploadError(
            f"{kind} exceeds maximum size ({len(payload)} > {max_bytes})",
            details={"kind": kind, "size": len(payload)},
        )
    return payload
