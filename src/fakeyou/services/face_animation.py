"""
Face Animation Submission.

    submit_face_animation(model_token, image, audio) → job token

Uploads the image and the audio, then creates the animation job from
the two upload tokens. Any upload failure aborts before the job is
created, so a failed submission never leaves a half-specified job.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import ValidationError

from fakeyou.api.schemas import (
    CreateFaceAnimationPayload,
    CreateFaceAnimationResponse,
    FaceAnimationMediaSource,
)
from fakeyou.core.config import ClientConfig
from fakeyou.core.logging import get_logger, info, warn
from fakeyou.errors import RequestError
from fakeyou.services.http import ApiTransport
from fakeyou.services.uploads import UploadService
from fakeyou.services.validators import validate_media, validate_model_token

_LOG = get_logger("fakeyou.face_animation")

# Payload options a caller may override
FACE_ANIMATION_OPTIONS = frozenset({
    "dimensions",
    "disable_face_enhancement",
    "make_still",
    "remove_watermark",
})


class FaceAnimationService:
    """Creates face animation jobs from uploaded media."""

    def __init__(self, transport: ApiTransport, uploads: UploadService, config: ClientConfig):
        self.transport = transport
        self.uploads = uploads
        self.config = config

    async def create_face_animation(self, payload: CreateFaceAnimationPayload) -> CreateFaceAnimationResponse:
        """
        Send POST /animation/face_animation/create with a ready payload.

        Raises:
            RequestError: On HTTP failure or a malformed response.
            TooManyRequestsError: When rate limited.
        """
        response = await self.transport.request(
            "POST", "/animation/face_animation/create",
            json=payload.to_request_json(),
            error_cls=RequestError,
            action="face animation",
        )
        return self.transport.parse(
            response, CreateFaceAnimationResponse, error_cls=RequestError, action="face animation",
        )

    async def submit_face_animation(
        self,
        model_token: str,
        image: bytes,
        audio: bytes,
        *,
        image_filename: Optional[str] = None,
        audio_filename: Optional[str] = None,
        **options: Any,
    ) -> str:
        """
        Upload media and submit a face animation job.

        Args:
            model_token: Model token forwarded as maybe_model_token.
            image: Face image bytes.
            audio: Speech audio bytes.
            image_filename: Optional name (sets the upload content type).
            audio_filename: Optional name (sets the upload content type).
            **options: dimensions, disable_face_enhancement, make_still,
                remove_watermark.

        Returns:
            The inference job token.

        Raises:
            RequestError: Invalid model token or options, vendor rejection.
            UploadError: Media invalid or upload failed.
        """
        model_token = validate_model_token(model_token)
        unknown = set(options) - FACE_ANIMATION_OPTIONS
        if unknown:
            raise RequestError(
                f"Unknown face animation options: {', '.join(sorted(unknown))}",
                details={"options": sorted(unknown)},
            )

        # Build the payload before uploading so bad options cost no upload
        try:
            payload = CreateFaceAnimationPayload.from_upload_tokens(
                image_token="", audio_token="", maybe_model_token=model_token, **options,
            )
        except ValidationError as e:
            raise RequestError(
                "Invalid face animation options", details={"errors": e.error_count()},
            ) from e

        # Both media must be valid before either is uploaded
        validate_media(image, "image", self.config.uploads.max_image_bytes)
        validate_media(audio, "audio", self.config.uploads.max_audio_bytes)

        image_upload = await self.uploads.upload_image(image, image_filename)
        audio_upload = await self.uploads.upload_audio(audio, audio_filename)
        payload = payload.model_copy(update={
            "image_source": FaceAnimationMediaSource(maybe_media_upload_token=image_upload.upload_token),
            "audio_source": FaceAnimationMediaSource(maybe_media_upload_token=audio_upload.upload_token),
        })
        body = await self.create_face_animation(payload)

        if not body.success or not body.inference_job_token:
            reason = body.error_reason or "no job token returned"
            warn(_LOG, "face_animation_rejected", model_token=model_token, reason=reason)
            raise RequestError(f"Face animation rejected: {reason}")

        info(
            _LOG, "face_animation_submitted",
            model_token=model_token, job_token=body.inference_job_token,
        )
        return body.inference_job_token
