"""
Vendor API Request/Response Schemas.

Pydantic models for every payload exchanged with the FakeYou API.
These schemas provide:
    - Response validation (a body that does not match is "malformed")
    - Request serialization with the vendor's exact field names
    - A normalized InferenceJob view shared by TTS and face animation

Vendor field names are kept verbatim (maybe_* prefixes included) so a
model dumps to exactly what the API expects. Unknown response fields
are ignored; the vendor adds fields without notice.

Example TTS job status body:
    {
        "success": true,
        "state": {
            "job_token": "JTINF:abc",
            "status": "complete_success",
            "maybe_public_bucket_wav_audio_path": "/tts_inference_output/.../x.wav"
        }
    }
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class JobStatus(str, Enum):
    """Job status values reported by the vendor."""
    PENDING = "pending"
    STARTED = "started"
    ATTEMPT_FAILED = "attempt_failed"
    COMPLETE_SUCCESS = "complete_success"
    COMPLETE_FAILURE = "complete_failure"
    DEAD = "dead"


class InferenceStatus(str, Enum):
    """
    Normalized job status.

    pending and running may still change; succeeded and failed are
    terminal.
    """
    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @classmethod
    def from_vendor(cls, status: JobStatus) -> "InferenceStatus":
        # attempt_failed means the vendor will retry the job
        return _VENDOR_STATUS_MAP[status]

    @property
    def is_terminal(self) -> bool:
        return self in (InferenceStatus.SUCCEEDED, InferenceStatus.FAILED)


_VENDOR_STATUS_MAP = {
    JobStatus.PENDING: InferenceStatus.PENDING,
    JobStatus.STARTED: InferenceStatus.RUNNING,
    JobStatus.ATTEMPT_FAILED: InferenceStatus.RUNNING,
    JobStatus.COMPLETE_SUCCESS: InferenceStatus.SUCCEEDED,
    JobStatus.COMPLETE_FAILURE: InferenceStatus.FAILED,
    JobStatus.DEAD: InferenceStatus.FAILED,
}


class VendorModel(BaseModel):
    """Base for vendor payloads: ignore unknown fields, allow aliases."""
    # model_token is a vendor field name, not a pydantic attribute
    model_config = ConfigDict(extra="ignore", populate_by_name=True, protected_namespaces=())


# =============================================================================
# Session
# =============================================================================

class LoginPayload(VendorModel):
    username_or_email: str
    password: str


class LoginResponse(VendorModel):
    success: bool = False
    error_type: Optional[str] = None
    error_message: Optional[str] = None


# =============================================================================
# Text-to-speech
# =============================================================================

class TtsInferencePayload(VendorModel):
    """
    Body of POST /tts/inference.

    A fresh idempotency token is generated per payload; re-sending the
    same payload object does not create a second job.
    """
    uuid_idempotency_token: UUID = Field(default_factory=uuid4)
    tts_model_token: str
    inference_text: str


class TtsInferenceResponse(VendorModel):
    success: bool
    error_type: Optional[str] = None
    error_message: Optional[str] = None
    error_reason: Optional[str] = None
    inference_job_token: Optional[str] = None
    inference_job_token_type: Optional[str] = None


class TtsJobState(VendorModel):
    status: JobStatus
    job_token: str
    maybe_public_bucket_wav_audio_path: Optional[str] = None
    title: Optional[str] = None
    raw_inference_text: Optional[str] = None
    maybe_extra_status_description: Optional[str] = None
    attempt_count: Optional[int] = None


class TtsJobResponse(VendorModel):
    """Body of GET /tts/job/{token}."""
    success: bool
    state: Optional[TtsJobState] = None


class TtsVoice(VendorModel):
    """A voice (TTS model) from GET /tts/list. Read-only."""
    model_token: str
    tts_model_type: str
    title: str
    ietf_language_tag: str
    ietf_primary_language_subtag: str
    creator_display_name: Optional[str] = None


class TtsVoiceList(VendorModel):
    success: bool = True
    models: list[TtsVoice]


# =============================================================================
# Media uploads
# =============================================================================

class UploadFileResponse(VendorModel):
    success: bool
    upload_token: Optional[str] = None


# =============================================================================
# Face animation
# =============================================================================

class FaceAnimationMediaSource(VendorModel):
    maybe_media_upload_token: str


class CreateFaceAnimationPayload(VendorModel):
    """
    Body of POST /animation/face_animation/create.

    The vendor spells the audio key "audio_sorce"; the field is named
    audio_source here and dumped under the vendor's key.

    Example:
        >>> payload = CreateFaceAnimationPayload.from_upload_tokens(
        ...     image_token="MU:img", audio_token="MU:aud", make_still=True,
        ... )
        >>> payload.to_request_json()["audio_sorce"]
        {'maybe_media_upload_token': 'MU:aud'}
    """
    audio_source: FaceAnimationMediaSource = Field(alias="audio_sorce")
    image_source: FaceAnimationMediaSource
    dimensions: str = "twitter_square"
    disable_face_enhancement: bool = False
    make_still: bool = False
    remove_watermark: bool = False
    maybe_model_token: Optional[str] = None
    uuid_idempotency_token: UUID = Field(default_factory=uuid4)

    @classmethod
    def from_upload_tokens(cls, image_token: str, audio_token: str, **options: Any) -> "CreateFaceAnimationPayload":
        return cls(
            audio_source=FaceAnimationMediaSource(maybe_media_upload_token=audio_token),
            image_source=FaceAnimationMediaSource(maybe_media_upload_token=image_token),
            **options,
        )

    def to_request_json(self) -> dict[str, Any]:
        """Dump with vendor keys, dropping unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class CreateFaceAnimationResponse(VendorModel):
    success: bool
    inference_job_token: Optional[str] = None
    error_reason: Optional[str] = None


class FaceAnimationRequest(VendorModel):
    inference_category: Optional[str] = None
    maybe_model_type: Optional[str] = None
    maybe_model_token: Optional[str] = None
    maybe_model_title: Optional[str] = None
    maybe_raw_inference_text: Optional[str] = None


class FaceAnimationStatus(VendorModel):
    status: JobStatus
    maybe_extra_status_description: Optional[str] = None
    maybe_assigned_worker: Optional[str] = None
    maybe_assigned_cluster: Optional[str] = None
    maybe_first_started_at: Optional[str] = None
    attempt_count: int = 0
    require_keepalive: bool = False
    maybe_failure_category: Optional[str] = None


class FaceAnimationResult(VendorModel):
    entity_type: Optional[str] = None
    entity_token: Optional[str] = None
    maybe_public_bucket_media_path: Optional[str] = None
    maybe_successfully_completed_at: Optional[str] = None


class FaceAnimationJobState(VendorModel):
    job_token: str
    request: Optional[FaceAnimationRequest] = None
    status: FaceAnimationStatus
    maybe_result: Optional[FaceAnimationResult] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class FaceAnimationJobResponse(VendorModel):
    """Body of GET /model_inference/job_status/{token}."""
    success: bool
    state: Optional[FaceAnimationJobState] = None


# =============================================================================
# Normalized job view
# =============================================================================

@dataclass(frozen=True)
class InferenceJob:
    """
    Client-side view of a job at one point in time.

    Attributes:
        job_token: Token returned at submission.
        kind: "tts" or "face_animation".
        status: Normalized status.
        vendor_status: Raw vendor status (None if the body had no state).
        result_path: Public bucket path of the output, once succeeded.
        result_url: Full public URL of the output, once succeeded.
        attempts: Status queries made so far by the poller.
        response: The parsed vendor response.
    """
    job_token: str
    kind: str
    status: InferenceStatus
    vendor_status: Optional[JobStatus] = None
    result_path: Optional[str] = None
    result_url: Optional[str] = None
    attempts: int = 0
    response: Optional[BaseModel] = None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal
