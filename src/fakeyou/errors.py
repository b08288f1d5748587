"""
Error Codes and Exceptions.

Every failure surfaced by the client derives from FakeYouError, which
carries a machine-readable code and optional details:

    FakeYouError
    ├── AuthError              credentials rejected, HTTP 401/403
    ├── RequestError           submission or listing rejected
    │   └── TooManyRequestsError   HTTP 429
    ├── UploadError            media invalid or upload failed
    ├── PollError              malformed status response, unknown job
    ├── TimeoutError           polling bound exceeded
    └── JobFailedError         job reached a failed terminal status

TimeoutError deliberately shadows the builtin inside this package;
import it as fakeyou.errors.TimeoutError (or catch FakeYouError).
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional, Type

import httpx

if TYPE_CHECKING:
    from fakeyou.api.schemas import InferenceJob


class ErrorCode:
    """Standardized error codes carried by FakeYouError.code."""
    AUTH_FAILED = "AUTH_FAILED"
    REQUEST_REJECTED = "REQUEST_REJECTED"
    TOO_MANY_REQUESTS = "TOO_MANY_REQUESTS"
    UPLOAD_FAILED = "UPLOAD_FAILED"
    POLL_FAILED = "POLL_FAILED"
    TIMEOUT = "TIMEOUT"
    JOB_FAILED = "JOB_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class FakeYouError(Exception):
    """
    Base exception for client errors.

    Attributes:
        message: Human-readable error message.
        code: Error code from ErrorCode.
        details: Additional context (HTTP status, job token, ...).
    """
    def __init__(self, message: str, code: str = ErrorCode.INTERNAL_ERROR, details: Optional[Dict] = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a structured error dict (for logs or API layers)."""
        result = {
            "ok": False,
            "error": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class AuthError(FakeYouError):
    """Raised when the service rejects credentials or the session."""
    def __init__(self, message: str = "Failed to authenticate user, check your credentials",
                 details: Optional[Dict] = None):
        super().__init__(message, ErrorCode.AUTH_FAILED, details)


class RequestError(FakeYouError):
    """Raised when a submission is malformed or rejected by the service."""
    def __init__(self, message: str, details: Optional[Dict] = None, code: str = ErrorCode.REQUEST_REJECTED):
        super().__init__(message, code, details)


class TooManyRequestsError(RequestError):
    """Raised on HTTP 429; the vendor rate-limits aggressively."""
    def __init__(self, message: str = "Too many requests", details: Optional[Dict] = None):
        super().__init__(message, details, code=ErrorCode.TOO_MANY_REQUESTS)


class UploadError(FakeYouError):
    """Raised when media cannot be encoded or the upload fails."""
    def __init__(self, message: str, details: Optional[Dict] = None):
        super().__init__(message, ErrorCode.UPLOAD_FAILED, details)


class PollError(FakeYouError):
    """Raised when a job status response is malformed or the job is unknown."""
    def __init__(self, message: str, details: Optional[Dict] = None):
        super().__init__(message, ErrorCode.POLL_FAILED, details)


class TimeoutError(FakeYouError):
    """Raised when polling exceeds its attempt or elapsed-time bound."""
    def __init__(self, message: str, details: Optional[Dict] = None):
        super().__init__(message, ErrorCode.TIMEOUT, details)


class JobFailedError(FakeYouError):
    """
    Raised when a job reaches a failed terminal status.

    Attributes:
        job: The last observed InferenceJob (vendor response included).
    """
    def __init__(self, message: str, job: "InferenceJob", details: Optional[Dict] = None):
        self.job = job
        merged = {"job_token": job.job_token, "vendor_status": job.vendor_status}
        merged.update(details or {})
        super().__init__(message, ErrorCode.JOB_FAILED, merged)


def raise_for_status(
    response: httpx.Response,
    error_cls: Type[FakeYouError],
    action: str,
) -> None:
    """
    Map an HTTP error status onto the client's error hierarchy.

    401/403 become AuthError and 429 becomes TooManyRequestsError no
    matter which operation failed; every other 4xx/5xx becomes error_cls.

    Args:
        response: The received response.
        error_cls: Error kind of the calling operation.
        action: Short description used in the message ("tts inference").
    """
    if response.is_success:
        return

    status = response.status_code
    details = {"status_code": status, "url": str(response.request.url)}
    if status in (401, 403):
        raise AuthError(details=details)
    if status == 429:
        raise TooManyRequestsError(details=details)

    body = response.text[:200] if response.content else ""
    if body:
        details["body"] = body
    raise error_cls(f"{action} failed with HTTP {status}", details=details)


def transport_error(
    exc: httpx.HTTPError,
    error_cls: Type[FakeYouError],
    action: str,
) -> FakeYouError:
    """Build (not raise) the operation's error for a transport failure."""
    return error_cls(f"{action} failed: {exc.__class__.__name__}: {exc}", details={"cause": str(exc)})
