"""
Tests for configuration validation and defaults.

Tests cover:
- Defaults class values
- ClientConfig.from_settings() for every section
- ConfigValidationError on invalid values
- String log level coercion
- load_settings() from YAML, missing files and env overrides
"""
import pytest

from fakeyou.core.config import (
    ApiConfig,
    ClientConfig,
    ConfigValidationError,
    Defaults,
    PollingConfig,
    Settings,
    load_settings,
)


class TestDefaults:
    """Tests for Defaults class values."""

    def test_api_defaults(self):
        """Defaults should point at the public vendor API and bucket."""
        assert Defaults.API_BASE_URL == "https://api.fakeyou.com"
        assert Defaults.API_STORAGE_BASE_URL == "https://storage.googleapis.com/vocodes-public"
        assert Defaults.API_SESSION_COOKIE == "session"

    def test_http_defaults(self):
        """Defaults should have a 10s connect timeout and a versioned user agent."""
        assert Defaults.HTTP_CONNECT_TIMEOUT_S == 10.0
        assert Defaults.HTTP_USER_AGENT.startswith("fakeyou-client@")

    def test_polling_defaults(self):
        """Poll intervals match the vendor's rate limits."""
        assert Defaults.POLLING_TTS_INTERVAL_S == 8.0
        assert Defaults.POLLING_FACE_ANIMATION_INTERVAL_S == 10.0
        assert Defaults.POLLING_BACKOFF_MULTIPLIER == 1.0
        assert Defaults.POLLING_MAX_ATTEMPTS > 0
        assert Defaults.POLLING_TIMEOUT_S > 0

    def test_logging_defaults(self):
        """Defaults should log at NORMAL with an 80-char text preview."""
        assert Defaults.LOGGING_LEVEL == 2
        assert Defaults.LOGGING_TEXT_PREVIEW_CHARS == 80


class TestClientConfigFromSettings:
    """Tests for ClientConfig.from_settings()."""

    def test_empty_raw_uses_defaults(self):
        """Empty settings should produce the default config."""
        config = ClientConfig.from_settings(Settings(raw={}))

        assert config.api == ApiConfig()
        assert config.polling == PollingConfig()
        assert config.http.connect_timeout_s == Defaults.HTTP_CONNECT_TIMEOUT_S
        assert config.uploads.max_image_bytes == Defaults.UPLOADS_MAX_IMAGE_BYTES
        assert config.logging.level == Defaults.LOGGING_LEVEL

    def test_custom_values(self):
        """Custom values should be coerced to their field types."""
        config = ClientConfig.from_settings(Settings(raw={
            "api": {"base_url": "https://proxy.example.com/"},
            "polling": {"tts_interval_s": "2.5", "max_attempts": 3, "backoff_multiplier": 2},
            "uploads": {"max_audio_bytes": 1024},
        }))

        assert config.api.base_url == "https://proxy.example.com"  # trailing slash stripped
        assert config.polling.tts_interval_s == 2.5
        assert config.polling.max_attempts == 3
        assert config.polling.backoff_multiplier == 2.0
        assert config.uploads.max_audio_bytes == 1024

    def test_none_section_uses_defaults(self):
        """An empty YAML section (null) behaves like a missing one."""
        config = ClientConfig.from_settings(Settings(raw={"polling": None}))
        assert config.polling == PollingConfig()

    def test_zero_interval_allowed(self):
        """A zero poll interval is valid (used by tests and local mocks)."""
        config = ClientConfig.from_settings(Settings(raw={"polling": {"tts_interval_s": 0}}))
        assert config.polling.tts_interval_s == 0.0

    @pytest.mark.parametrize("section,key,value", [
        ("polling", "max_attempts", 0),
        ("polling", "timeout_s", -1),
        ("polling", "tts_interval_s", -0.5),
        ("polling", "backoff_multiplier", 0.5),
        ("http", "connect_timeout_s", 0),
        ("uploads", "max_image_bytes", 0),
        ("logging", "level", 7),
    ])
    def test_out_of_range_rejected(self, section, key, value):
        """Out-of-range values should raise ConfigValidationError."""
        with pytest.raises(ConfigValidationError):
            ClientConfig.from_settings(Settings(raw={section: {key: value}}))

    def test_non_numeric_rejected(self):
        """A non-numeric value for a numeric field should be rejected."""
        with pytest.raises(ConfigValidationError, match="invalid configuration value"):
            ClientConfig.from_settings(Settings(raw={"polling": {"max_attempts": "many"}}))

    def test_base_url_requires_scheme(self):
        """A base URL without http(s) scheme should be rejected."""
        with pytest.raises(ConfigValidationError, match="http/https"):
            ClientConfig.from_settings(Settings(raw={"api": {"base_url": "api.fakeyou.com"}}))

    def test_empty_session_cookie_rejected(self):
        """An empty session cookie name should be rejected."""
        with pytest.raises(ConfigValidationError):
            ClientConfig.from_settings(Settings(raw={"api": {"session_cookie": ""}}))

    @pytest.mark.parametrize("raw,expected", [
        ("DEBUG", 4),
        ("verbose", 3),
        ("INFO", 2),
        ("minimal", 1),
        ("unknown", Defaults.LOGGING_LEVEL),
    ])
    def test_string_log_levels(self, raw, expected):
        """Level names should map to numeric levels."""
        config = ClientConfig.from_settings(Settings(raw={"logging": {"level": raw}}))
        assert config.logging.level == expected


class TestSettings:
    """Tests for the Settings container."""

    def test_properties(self):
        """Properties should read the raw api and logging sections."""
        settings = Settings(raw={"api": {"base_url": "https://x.test"}, "logging": {"level": 3}})
        assert settings.base_url == "https://x.test"
        assert settings.log_level == 3

    def test_properties_with_empty_sections(self):
        """Empty YAML sections (null) should fall back to defaults."""
        settings = Settings(raw={"api": None, "logging": None})
        assert settings.base_url == Defaults.API_BASE_URL
        assert settings.log_level == Defaults.LOGGING_LEVEL

    def test_frozen(self):
        """Settings should be immutable."""
        settings = Settings(raw={})
        with pytest.raises(Exception):
            settings.raw = {"x": 1}

    def test_get_client_config(self):
        """get_client_config() should return a validated ClientConfig."""
        assert isinstance(Settings(raw={}).get_client_config(), ClientConfig)


class TestLoadSettings:
    """Tests for load_settings()."""

    def test_missing_file_is_optional(self, tmp_path):
        """A missing settings file should yield empty settings."""
        settings = load_settings(str(tmp_path / "missing.yaml"))
        assert settings.raw == {}

    def test_missing_file_required(self, tmp_path):
        """required=True should raise for a missing file."""
        with pytest.raises(FileNotFoundError):
            load_settings(str(tmp_path / "missing.yaml"), required=True)

    def test_loads_yaml(self, tmp_path):
        """Values from a YAML file should reach the client config."""
        path = tmp_path / "fakeyou.yaml"
        path.write_text("polling:\n  max_attempts: 7\n", encoding="utf-8")

        config = load_settings(str(path)).get_client_config()
        assert config.polling.max_attempts == 7

    def test_settings_path_from_env(self, tmp_path, monkeypatch):
        """FAKEYOU_SETTINGS should select the settings file."""
        path = tmp_path / "custom.yaml"
        path.write_text("polling:\n  timeout_s: 12\n", encoding="utf-8")
        monkeypatch.setenv("FAKEYOU_SETTINGS", str(path))

        assert load_settings().get_client_config().polling.timeout_s == 12.0

    def test_non_mapping_rejected(self, tmp_path):
        """A YAML list at top level should be rejected."""
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigValidationError, match="mapping"):
            load_settings(str(path))

    def test_invalid_yaml_rejected(self, tmp_path):
        """Unparseable YAML should raise ConfigValidationError."""
        path = tmp_path / "broken.yaml"
        path.write_text("polling: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigValidationError, match="invalid YAML"):
            load_settings(str(path))

    def test_env_overrides(self, tmp_path, monkeypatch):
        """Environment variables should win over the settings file."""
        path = tmp_path / "fakeyou.yaml"
        path.write_text("api:\n  base_url: https://from-file.test\n", encoding="utf-8")
        monkeypatch.setenv("FAKEYOU_BASE_URL", "https://from-env.test")
        monkeypatch.setenv("FAKEYOU_POLL_MAX_ATTEMPTS", "9")

        config = load_settings(str(path)).get_client_config()
        assert config.api.base_url == "https://from-env.test"
        assert config.polling.max_attempts == 9
