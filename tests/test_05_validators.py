"""
Tests for input validators.

Every validator must raise the error kind of the operation it guards.
"""
import pytest

from fakeyou.errors import AuthError, PollError, RequestError, UploadError
from fakeyou.services.validators import (
    MAX_INFERENCE_TEXT_CHARS,
    validate_credentials,
    validate_job_token,
    validate_media,
    validate_model_token,
    validate_text,
)


class TestValidateCredentials:
    """Tests for validate_credentials()."""

    def test_strips_username(self):
        """The username should be stripped."""
        assert validate_credentials("  me@example.com ", "pw") == ("me@example.com", "pw")

    def test_password_kept_verbatim(self):
        """The password should not be stripped."""
        assert validate_credentials("me", " spaced ")[1] == " spaced "

    @pytest.mark.parametrize("username,password", [("", "pw"), ("   ", "pw"), (None, "pw"), ("me", ""), ("me", None)])
    def test_missing(self, username, password):
        """Blank or missing credentials should raise AuthError."""
        with pytest.raises(AuthError):
            validate_credentials(username, password)

    @pytest.mark.parametrize("username,password", [(1, "pw"), ("me", 1234), (b"me", "pw")])
    def test_non_string(self, username, password):
        """Non-string credentials should raise AuthError, not AttributeError."""
        with pytest.raises(AuthError, match="must be a string"):
            validate_credentials(username, password)


class TestValidateModelToken:
    """Tests for validate_model_token()."""

    def test_valid(self):
        """A valid token should be returned stripped."""
        assert validate_model_token(" TM:7wbtjphx8h8v ") == "TM:7wbtjphx8h8v"

    @pytest.mark.parametrize("token", ["", "   ", None])
    def test_missing(self, token):
        """A blank token should be reported as required."""
        with pytest.raises(RequestError, match="required"):
            validate_model_token(token)

    @pytest.mark.parametrize("token", ["TM:a b", "../tts", "TM:" + "a" * 200, "tok?x=1"])
    def test_malformed(self, token):
        """Tokens with spaces, slashes or query characters are malformed."""
        with pytest.raises(RequestError, match="malformed"):
            validate_model_token(token)

    @pytest.mark.parametrize("token", [123, ["TM:a"], b"TM:a"])
    def test_non_string(self, token):
        """A non-string token should raise RequestError naming the field."""
        with pytest.raises(RequestError, match="must be a string") as exc_info:
            validate_model_token(token)
        assert exc_info.value.details == {"field": "model_token"}


class TestValidateText:
    """Tests for validate_text()."""

    def test_strips(self):
        """Surrounding whitespace should be stripped."""
        assert validate_text("  Hello, world!  ") == "Hello, world!"

    def test_max_length_accepted(self):
        """Text at the length limit should be accepted."""
        assert len(validate_text("a" * MAX_INFERENCE_TEXT_CHARS)) == MAX_INFERENCE_TEXT_CHARS

    def test_too_long(self):
        """Text over the limit should raise with its length."""
        with pytest.raises(RequestError) as exc_info:
            validate_text("a" * (MAX_INFERENCE_TEXT_CHARS + 1))
        assert exc_info.value.details["length"] == MAX_INFERENCE_TEXT_CHARS + 1

    @pytest.mark.parametrize("text", ["", "  \n ", None])
    def test_blank(self, text):
        """Blank text should raise RequestError."""
        with pytest.raises(RequestError):
            validate_text(text)

    @pytest.mark.parametrize("text", [b"hi", 42])
    def test_non_string(self, text):
        """Non-string text should raise RequestError, not AttributeError."""
        with pytest.raises(RequestError, match="must be a string"):
            validate_text(text)


class TestValidateJobToken:
    """Tests for validate_job_token()."""

    def test_valid(self):
        """A well-formed job token should pass unchanged."""
        assert validate_job_token("JTINF:abc-123") == "JTINF:abc-123"

    @pytest.mark.parametrize("token", ["", None, "job/../../login", "job abc"])
    def test_invalid(self, token):
        """Blank or path-like job tokens should raise PollError."""
        with pytest.raises(PollError):
            validate_job_token(token)

    def test_non_string(self):
        """A non-string job token should raise PollError."""
        with pytest.raises(PollError, match="must be a string"):
            validate_job_token(42)


class TestValidateMedia:
    """Tests for validate_media()."""

    def test_bytes_like_accepted(self):
        """bytearray and memoryview should be converted to bytes."""
        assert validate_media(bytearray(b"\x89PNG"), "image", 100) == b"\x89PNG"
        assert validate_media(memoryview(b"RIFF"), "audio", 100) == b"RIFF"

    def test_empty(self):
        """Empty media should raise UploadError."""
        with pytest.raises(UploadError, match="empty"):
            validate_media(b"", "image", 100)

    def test_not_bytes(self):
        """A str in place of bytes should raise UploadError."""
        with pytest.raises(UploadError, match="must be bytes"):
            validate_media("not bytes", "audio", 100)

    def test_too_large(self):
        """Media over the size limit should raise with kind and size."""
        with pytest.raises(UploadError, match="exceeds") as exc_info:
            validate_media(b"x" * 11, "image", 10)
        assert exc_info.value.details == {"kind": "image", "size": 11}
