"""
Text-to-Speech Submission and Voice Listing.

    submit_tts(model_token, text) → job token

Submission only enqueues a job; the audio is produced asynchronously and
fetched by polling the returned token (see polling.py).
"""
from __future__ import annotations

from typing import List

from fakeyou.api.schemas import TtsInferencePayload, TtsInferenceResponse, TtsVoice, TtsVoiceList
from fakeyou.core.config import ClientConfig
from fakeyou.core.logging import get_logger, info, verbose, warn
from fakeyou.errors import RequestError
from fakeyou.services.http import ApiTransport
from fakeyou.services.validators import validate_model_token, validate_text
from fakeyou.utils.text import preview

_LOG = get_logger("fakeyou.tts")


class TtsService:
    """
    TTS endpoints: inference submission and the voice catalogue.

    Attributes:
        transport: Shared ApiTransport.
        config: Client configuration.
    """

    def __init__(self, transport: ApiTransport, config: ClientConfig):
        self.transport = transport
        self.config = config

    async def tts_inference(self, model_token: str, text: str) -> TtsInferenceResponse:
        """
        Send POST /tts/inference and return the raw response.

        The response may report success=False; submit_tts() turns that
        into a RequestError.

        Raises:
            RequestError: On invalid input or HTTP failure.
            TooManyRequestsError: When rate limited.
            AuthError: When the session is rejected.
        """
        payload = TtsInferencePayload(
            tts_model_token=validate_model_token(model_token),
            inference_text=validate_text(text),
        )
        verbose(
            _LOG, "tts_inference",
            model_token=payload.tts_model_token,
            text=preview(payload.inference_text, self.config.logging.text_preview_chars),
        )
        response = await self.transport.request(
            "POST", "/tts/inference",
            json=payload.model_dump(mode="json"),
            error_cls=RequestError,
            action="tts inference",
        )
        return self.transport.parse(response, TtsInferenceResponse, error_cls=RequestError, action="tts inference")

    async def submit_tts(self, model_token: str, text: str) -> str:
        """
        Submit a TTS job.

        Args:
            model_token: Voice model token (e.g., "TM:7wbtjphx8h8v").
            text: Text to speak.

        Returns:
            The inference job token.

        Raises:
            RequestError: Invalid model token or text, vendor rejection.
            TooManyRequestsError: When rate limited.
        """
        body = await self.tts_inference(model_token, text)

        if not body.success or not body.inference_job_token:
            reason = body.error_reason or body.error_message or body.error_type or "no job token returned"
            warn(_LOG, "tts_rejected", model_token=model_token, reason=reason)
            raise RequestError(
                f"TTS inference rejected: {reason}",
                details={k: v for k, v in {
                    "error_type": body.error_type,
                    "error_reason": body.error_reason,
                }.items() if v},
            )

        info(
            _LOG, "tts_submitted",
            model_token=model_token, job_token=body.inference_job_token, chars=len(text.strip()),
        )
        return body.inference_job_token

    async def voices(self) -> List[TtsVoice]:
        """
        List the available TTS voices (GET /tts/list).

        Raises:
            RequestError: On HTTP failure or a body without a models list.
        """
        response = await self.transport.request("GET", "/tts/list", error_cls=RequestError, action="voice listing")
        listing = self.transport.parse(response, TtsVoiceList, error_cls=RequestError, action="voice listing")
        verbose(_LOG, "voices_listed", count=len(listing.models))
        return listing.models
