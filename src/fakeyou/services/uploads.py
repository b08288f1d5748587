"""
Media Uploads.

Face animation takes uploaded media, not raw bytes: the image and the
audio are each sent as a multipart form and referenced later by the
returned upload token.

Form fields:
    uuid_idempotency_token  fresh UUID4 per upload
    source                  always "file"
    file                    the media bytes
"""
from __future__ import annotations

import mimetypes
from typing import Optional
from uuid import uuid4

from fakeyou.api.schemas import UploadFileResponse
from fakeyou.core.config import ClientConfig
from fakeyou.core.logging import get_logger, info, warn
from fakeyou.errors import UploadError
from fakeyou.services.http import ApiTransport
from fakeyou.services.validators import validate_media

_LOG = get_logger("fakeyou.uploads")

_DEFAULT_NAMES = {
    "image": ("image.png", "image/png"),
    "audio": ("audio.wav", "audio/wav"),
}


def guess_content_type(filename: str, kind: str) -> str:
    """
    Content type for an upload of the given kind.

    A guess that does not match the kind ("notes.txt" as an image) falls
    back to the kind's default.
    """
    guessed, _ = mimetypes.guess_type(filename)
    if guessed and guessed.startswith(kind + "/"):
        return guessed
    return _DEFAULT_NAMES[kind][1]


class UploadService:
    """Uploads images and audio to /media_uploads."""

    def __init__(self, transport: ApiTransport, config: ClientConfig):
        self.transport = transport
        self.config = config

    async def upload_image(self, data: bytes, filename: Optional[str] = None) -> UploadFileResponse:
        """
        Upload an image (the face to animate).

        Raises:
            UploadError: Invalid media, HTTP failure or vendor rejection.
        """
        payload = validate_media(data, "image", self.config.uploads.max_image_bytes)
        return await self._upload("image", "/media_uploads/upload_image", payload, filename)

    async def upload_audio(self, data: bytes, filename: Optional[str] = None) -> UploadFileResponse:
        """
        Upload audio (the speech to lip-sync).

        Raises:
            UploadError: Invalid media, HTTP failure or vendor rejection.
        """
        payload = validate_media(data, "audio", self.config.uploads.max_audio_bytes)
        return await self._upload("audio", "/media_uploads/upload_audio", payload, filename)

    async def _upload(self, kind: str, path: str, payload: bytes, filename: Optional[str]) -> UploadFileResponse:
        if filename:
            name, content_type = filename, guess_content_type(filename, kind)
        else:
            name, content_type = _DEFAULT_NAMES[kind]
        form = {
            "uuid_idempotency_token": str(uuid4()),
            "source": "file",
        }
        files = {"file": (name, payload, content_type)}

        response = await self.transport.request(
            "POST", path,
            data=form,
            files=files,
            error_cls=UploadError,
            action=f"{kind} upload",
        )
        body = self.transport.parse(response, UploadFileResponse, error_cls=UploadError, action=f"{kind} upload")

        if not body.success or not body.upload_token:
            warn(_LOG, "upload_rejected", kind=kind, size=len(payload))
            raise UploadError(f"{kind} upload rejected by the service", details={"kind": kind})

        info(_LOG, "upload_ok", kind=kind, size=len(payload), upload_token=body.upload_token)
        return body
