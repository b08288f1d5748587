"""
Tests for vendor payload schemas.

Tests cover:
- Vendor status to normalized status mapping
- Idempotency tokens on request payloads
- The "audio_sorce" key of the face animation payload
- Tolerance of unknown response fields, rejection of unknown statuses
"""
import pytest
from pydantic import ValidationError

from fakeyou.api.schemas import (
    CreateFaceAnimationPayload,
    FaceAnimationJobResponse,
    InferenceJob,
    InferenceStatus,
    JobStatus,
    TtsInferencePayload,
    TtsJobResponse,
    TtsVoiceList,
)

from conftest import face_job_body, tts_job_body


class TestStatusMapping:
    """Tests for InferenceStatus.from_vendor()."""

    @pytest.mark.parametrize("vendor,normalized", [
        (JobStatus.PENDING, InferenceStatus.PENDING),
        (JobStatus.STARTED, InferenceStatus.RUNNING),
        (JobStatus.ATTEMPT_FAILED, InferenceStatus.RUNNING),
        (JobStatus.COMPLETE_SUCCESS, InferenceStatus.SUCCEEDED),
        (JobStatus.COMPLETE_FAILURE, InferenceStatus.FAILED),
        (JobStatus.DEAD, InferenceStatus.FAILED),
    ])
    def test_mapping(self, vendor, normalized):
        """Vendor statuses should map to the normalized status."""
        assert InferenceStatus.from_vendor(vendor) is normalized

    def test_every_vendor_status_mapped(self):
        """No vendor status should be left without a mapping."""
        for status in JobStatus:
            InferenceStatus.from_vendor(status)

    def test_terminal(self):
        """Only SUCCEEDED and FAILED are terminal."""
        assert InferenceStatus.SUCCEEDED.is_terminal
        assert InferenceStatus.FAILED.is_terminal
        assert not InferenceStatus.PENDING.is_terminal
        assert not InferenceStatus.RUNNING.is_terminal

    def test_job_terminal_follows_status(self):
        """InferenceJob.is_terminal should follow its status."""
        job = InferenceJob(job_token="JTINF:a", kind="tts", status=InferenceStatus.RUNNING)
        assert not job.is_terminal


class TestTtsPayloads:
    """Tests for TTS request and response models."""

    def test_unique_idempotency_tokens(self):
        """Every payload should get a fresh idempotency token."""
        a = TtsInferencePayload(tts_model_token="TM:a", inference_text="hi")
        b = TtsInferencePayload(tts_model_token="TM:a", inference_text="hi")
        assert a.uuid_idempotency_token != b.uuid_idempotency_token

    def test_dump_is_json_ready(self):
        """The JSON dump should hold exactly the vendor's keys."""
        body = TtsInferencePayload(tts_model_token="TM:a", inference_text="hi").model_dump(mode="json")
        assert set(body) == {"uuid_idempotency_token", "tts_model_token", "inference_text"}
        assert isinstance(body["uuid_idempotency_token"], str)

    def test_job_response_parses(self):
        """A finished TTS job status should parse with its audio path."""
        body = TtsJobResponse.model_validate(tts_job_body("JTINF:a", "complete_success", "/x.wav"))
        assert body.state.status is JobStatus.COMPLETE_SUCCESS
        assert body.state.maybe_public_bucket_wav_audio_path == "/x.wav"

    def test_unknown_fields_ignored(self):
        """Fields the models do not know should be ignored."""
        raw = tts_job_body("JTINF:a", "pending")
        raw["state"]["brand_new_field"] = {"nested": True}
        raw["extra_top_level"] = 1
        assert TtsJobResponse.model_validate(raw).state.job_token == "JTINF:a"

    def test_unknown_status_rejected(self):
        """An unknown job status should fail validation."""
        with pytest.raises(ValidationError):
            TtsJobResponse.model_validate(tts_job_body("JTINF:a", "exploded"))

    def test_voice_list(self):
        """The voice listing should parse into TtsVoice models."""
        listing = TtsVoiceList.model_validate({
            "success": True,
            "models": [{
                "model_token": "TM:7wbtjphx8h8v",
                "tts_model_type": "tacotron2",
                "title": "Narrator",
                "ietf_language_tag": "en-US",
                "ietf_primary_language_subtag": "en",
                "creator_display_name": "someone",
                "is_front_page_featured": False,
            }],
        })
        assert listing.models[0].model_token == "TM:7wbtjphx8h8v"


class TestFaceAnimationPayload:
    """Tests for CreateFaceAnimationPayload."""

    def test_vendor_audio_key(self):
        """The audio source should be sent under the vendor's "audio_sorce" key."""
        body = CreateFaceAnimationPayload.from_upload_tokens("MU:img", "MU:aud").to_request_json()

        assert body["audio_sorce"] == {"maybe_media_upload_token": "MU:aud"}
        assert body["image_source"] == {"maybe_media_upload_token": "MU:img"}
        assert "audio_source" not in body

    def test_defaults_and_none_dropped(self):
        """Defaults should be sent and unset optionals dropped."""
        body = CreateFaceAnimationPayload.from_upload_tokens("MU:img", "MU:aud").to_request_json()

        assert body["dimensions"] == "twitter_square"
        assert body["make_still"] is False
        assert body["disable_face_enhancement"] is False
        assert body["remove_watermark"] is False
        assert "maybe_model_token" not in body

    def test_options(self):
        """Options passed to from_upload_tokens() should reach the body."""
        payload = CreateFaceAnimationPayload.from_upload_tokens(
            "MU:img", "MU:aud", make_still=True, dimensions="landscape", maybe_model_token="FA:1",
        )
        body = payload.to_request_json()
        assert body["make_still"] is True
        assert body["dimensions"] == "landscape"
        assert body["maybe_model_token"] == "FA:1"

    def test_parse_by_vendor_key(self):
        """Parsing should accept the vendor's "audio_sorce" key."""
        payload = CreateFaceAnimationPayload.model_validate({
            "audio_sorce": {"maybe_media_upload_token": "MU:aud"},
            "image_source": {"maybe_media_upload_token": "MU:img"},
        })
        assert payload.audio_source.maybe_media_upload_token == "MU:aud"

    def test_unique_idempotency_tokens(self):
        """Every payload should get a fresh idempotency token."""
        a = CreateFaceAnimationPayload.from_upload_tokens("MU:img", "MU:aud")
        b = CreateFaceAnimationPayload.from_upload_tokens("MU:img", "MU:aud")
        assert a.uuid_idempotency_token != b.uuid_idempotency_token

    def test_job_response_parses(self):
        """A finished face animation status should parse with its media path."""
        body = FaceAnimationJobResponse.model_validate(face_job_body("JTINF:f", "complete_success", "/v.mp4"))
        assert body.state.status.status is JobStatus.COMPLETE_SUCCESS
        assert body.state.maybe_result.maybe_public_bucket_media_path == "/v.mp4"
