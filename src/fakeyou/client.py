"""
FakeYouClient - Unified API Client.

The single entry point for all vendor operations. It owns the HTTP
transport, the configuration and the session, and delegates to the
services layer:

    login → (upload) → submit → poll

Example:
    >>> import asyncio
    >>> from fakeyou import FakeYouClient
    >>>
    >>> async def main():
    ...     async with await FakeYouClient.from_login_credentials("me", "secret") as client:
    ...         token = await client.submit_tts("TM:7wbtjphx8h8v", "Hello, world!")
    ...         job = await client.poll(token)
    ...         print(job.result_url)
    >>>
    >>> asyncio.run(main())

Anonymous use (no login) works for voice listing and TTS; call
login() later to attach a session.
"""
from __future__ import annotations

from typing import Any, List, Optional

import httpx

from fakeyou.api.schemas import (
    CreateFaceAnimationPayload,
    CreateFaceAnimationResponse,
    InferenceJob,
    TtsInferenceResponse,
    TtsVoice,
    UploadFileResponse,
)
from fakeyou.core.config import ClientConfig, Settings, load_settings
from fakeyou.core.logging import configure_logging, debug, get_logger
from fakeyou.services.face_animation import FaceAnimationService
from fakeyou.services.http import ApiTransport, create_http_client
from fakeyou.services.polling import JOB_KIND_FACE_ANIMATION, JOB_KIND_TTS, JobPoller, PollPolicy
from fakeyou.services import session as session_ops
from fakeyou.services.session import Session
from fakeyou.services.tts import TtsService
from fakeyou.services.uploads import UploadService

_LOG = get_logger("fakeyou.client")


class FakeYouClient:
    """
    Async client for the FakeYou TTS and face animation API.

    Attributes:
        config: Validated client configuration.
        session: Current Session, or None when anonymous.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Build a client.

        Args:
            config: Ready configuration. If None, built from settings.
            settings: Raw settings. If None, load_settings() is used.
            transport: Optional httpx transport (e.g., MockTransport in tests).

        Explicit settings or config reconfigure the package's logging:
        settings apply their whole logging section (environment still
        wins), config applies its logging.level.
        """
        if config is None:
            if settings is not None:
                configure_logging(settings=settings, force=True)
            config = (settings or load_settings()).get_client_config()
        else:
            configure_logging(level=config.logging.level, force=True)
        self.config = config
        self.session: Optional[Session] = None

        self._transport = ApiTransport(create_http_client(config, transport), config)
        self._tts = TtsService(self._transport, config)
        self._uploads = UploadService(self._transport, config)
        self._face_animation = FaceAnimationService(self._transport, self._uploads, config)
        self._poller = JobPoller(self._transport, config, self.request_file_url)
        debug(_LOG, "client_created", base_url=config.api.base_url)

    @classmethod
    async def from_login_credentials(
        cls,
        username: str,
        password: str,
        config: Optional[ClientConfig] = None,
        **kwargs: Any,
    ) -> "FakeYouClient":
        """
        Build a client and log in.

        The client is closed again if login fails.

        Raises:
            AuthError: If login fails.
        """
        client = cls(config, **kwargs)
        try:
            await client.login(username, password)
        except BaseException:
            await client.aclose()
            raise
        return client

    async def __aenter__(self) -> "FakeYouClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP transport. The client is unusable afterwards."""
        await self._transport.aclose()

    # -------------------------------------------------------------------------
    # Session
    # -------------------------------------------------------------------------

    async def login(self, username: str, password: str) -> Session:
        """
        Log in; later requests carry the session token.

        Raises:
            AuthError: Credentials rejected or the call failed.
        """
        self.session = await session_ops.login(self._transport, username, password)
        return self.session

    async def logout(self) -> None:
        """End the current session (no-op when anonymous)."""
        if self.session is None:
            return
        current, self.session = self.session, None
        await session_ops.logout(self._transport, current)

    # -------------------------------------------------------------------------
    # Text-to-speech
    # -------------------------------------------------------------------------

    async def tts_inference(self, model_token: str, text: str) -> TtsInferenceResponse:
        return await self._tts.tts_inference(model_token, text)

    async def submit_tts(self, model_token: str, text: str) -> str:
        """Submit a TTS job and return its job token. See TtsService.submit_tts."""
        return await self._tts.submit_tts(model_token, text)

    async def voices(self) -> List[TtsVoice]:
        """List the available TTS voices."""
        return await self._tts.voices()

    # -------------------------------------------------------------------------
    # Uploads and face animation
    # -------------------------------------------------------------------------

    async def upload_image(self, data: bytes, filename: Optional[str] = None) -> UploadFileResponse:
        return await self._uploads.upload_image(data, filename)

    async def upload_audio(self, data: bytes, filename: Optional[str] = None) -> UploadFileResponse:
        return await self._uploads.upload_audio(data, filename)

    async def create_face_animation(self, payload: CreateFaceAnimationPayload) -> CreateFaceAnimationResponse:
        return await self._face_animation.create_face_animation(payload)

    async def submit_face_animation(self, model_token: str, image: bytes, audio: bytes, **options: Any) -> str:
        """Upload media and submit a face animation job. See FaceAnimationService."""
        return await self._face_animation.submit_face_animation(model_token, image, audio, **options)

    # -------------------------------------------------------------------------
    # Polling
    # -------------------------------------------------------------------------

    async def get_tts_job(self, job_token: str) -> InferenceJob:
        return await self._poller.get_tts_job(job_token)

    async def get_face_animation_job(self, job_token: str) -> InferenceJob:
        return await self._poller.get_face_animation_job(job_token)

    async def poll(
        self,
        job_token: str,
        kind: str = JOB_KIND_TTS,
        policy: Optional[PollPolicy] = None,
    ) -> InferenceJob:
        """Wait until a job succeeds. See JobPoller.poll."""
        return await self._poller.poll(job_token, kind, policy)

    async def poll_tts_job(self, job_token: str, policy: Optional[PollPolicy] = None) -> InferenceJob:
        return await self._poller.poll(job_token, JOB_KIND_TTS, policy)

    async def poll_face_animation_job(self, job_token: str, policy: Optional[PollPolicy] = None) -> InferenceJob:
        return await self._poller.poll(job_token, JOB_KIND_FACE_ANIMATION, policy)

    # -------------------------------------------------------------------------
    # Media URLs
    # -------------------------------------------------------------------------

    def request_file_url(self, public_bucket_media_path: str) -> str:
        """
        Public URL for a bucket media path reported by a finished job.

        Example:
            >>> client.request_file_url("/tts_inference_output/a/b.wav")
            'https://storage.googleapis.com/vocodes-public/tts_inference_output/a/b.wav'
        """
        if public_bucket_media_path.startswith(("http://", "https://")):
            return public_bucket_media_path
        path = public_bucket_media_path
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.config.api.storage_base_url}{path}"
