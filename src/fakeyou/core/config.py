"""
Configuration Management for fakeyou-client.

This module provides centralized configuration handling with:
    - Default values (Defaults class)
    - Dataclass-based configuration objects
    - YAML file loading with environment variable overrides
    - Validation with meaningful error messages

Configuration Hierarchy (highest priority first):
    1. Environment variables (FAKEYOU_BASE_URL, FAKEYOU_POLL_TIMEOUT_S, etc.)
    2. YAML config file (config/fakeyou.yaml, or FAKEYOU_SETTINGS)
    3. Defaults class values

Example fakeyou.yaml:
    api:
      base_url: https://api.fakeyou.com

    polling:
      tts_interval_s: 8
      max_attempts: 120
      timeout_s: 900

    logging:
      level: 3  # VERBOSE
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional
import os
import yaml

from fakeyou import __version__


class ConfigValidationError(Exception):
    """
    Raised when configuration validation fails.

    Thrown when a configuration value is outside acceptable bounds
    or cannot be converted to the expected type.
    """
    pass


class Defaults:
    """
    Centralized default configuration values.

    Sections:
        - API: Vendor endpoints and session cookie
        - HTTP: Transport timeouts and user agent
        - Polling: Job status polling cadence and bounds
        - Uploads: Media size limits
        - Logging: Log level and text previews
    """

    # ─────────────────────────────────────────────────────────────────────────
    # API Endpoints
    # ─────────────────────────────────────────────────────────────────────────
    API_BASE_URL = "https://api.fakeyou.com"
    API_STORAGE_BASE_URL = "https://storage.googleapis.com/vocodes-public"
    API_SESSION_COOKIE = "session"      # Cookie carrying the login token

    # ─────────────────────────────────────────────────────────────────────────
    # HTTP Transport
    # ─────────────────────────────────────────────────────────────────────────
    HTTP_CONNECT_TIMEOUT_S = 10.0
    HTTP_TIMEOUT_S = 60.0               # Read/write/pool timeout
    HTTP_USER_AGENT = f"fakeyou-client@{__version__}"

    # ─────────────────────────────────────────────────────────────────────────
    # Job Polling
    # ─────────────────────────────────────────────────────────────────────────
    POLLING_TTS_INTERVAL_S = 8.0             # Vendor rate-limits faster polling
    POLLING_FACE_ANIMATION_INTERVAL_S = 10.0
    POLLING_BACKOFF_MULTIPLIER = 1.0         # 1.0 = fixed delay
    POLLING_MAX_INTERVAL_S = 30.0
    POLLING_MAX_ATTEMPTS = 120
    POLLING_TIMEOUT_S = 900.0                # 15 minutes

    # ─────────────────────────────────────────────────────────────────────────
    # Uploads
    # ─────────────────────────────────────────────────────────────────────────
    UPLOADS_MAX_IMAGE_BYTES = 10 * 1024 * 1024
    UPLOADS_MAX_AUDIO_BYTES = 25 * 1024 * 1024

    # ─────────────────────────────────────────────────────────────────────────
    # Logging
    # ─────────────────────────────────────────────────────────────────────────
    LOGGING_TEXT_PREVIEW_CHARS = 80     # Characters of inference text in logs
    LOGGING_LEVEL = 2                   # 1=MINIMAL, 2=NORMAL, 3=VERBOSE, 4=DEBUG


@dataclass
class ApiConfig:
    """Vendor endpoint configuration."""
    base_url: str = Defaults.API_BASE_URL
    storage_base_url: str = Defaults.API_STORAGE_BASE_URL
    session_cookie: str = Defaults.API_SESSION_COOKIE


@dataclass
class HttpConfig:
    """
    HTTP transport configuration.

    The connect timeout is kept short so an unreachable API fails fast;
    the general timeout covers slow uploads.
    """
    connect_timeout_s: float = Defaults.HTTP_CONNECT_TIMEOUT_S
    timeout_s: float = Defaults.HTTP_TIMEOUT_S
    user_agent: str = Defaults.HTTP_USER_AGENT


@dataclass
class PollingConfig:
    """
    Job polling configuration.

    The delay starts at the per-kind interval and is multiplied by
    backoff_multiplier after every non-terminal answer, capped at
    max_interval_s. Polling stops after max_attempts queries or
    timeout_s seconds, whichever comes first.
    """
    tts_interval_s: float = Defaults.POLLING_TTS_INTERVAL_S
    face_animation_interval_s: float = Defaults.POLLING_FACE_ANIMATION_INTERVAL_S
    backoff_multiplier: float = Defaults.POLLING_BACKOFF_MULTIPLIER
    max_interval_s: float = Defaults.POLLING_MAX_INTERVAL_S
    max_attempts: int = Defaults.POLLING_MAX_ATTEMPTS
    timeout_s: float = Defaults.POLLING_TIMEOUT_S


@dataclass
class UploadsConfig:
    """Media upload limits, checked before anything is sent."""
    max_image_bytes: int = Defaults.UPLOADS_MAX_IMAGE_BYTES
    max_audio_bytes: int = Defaults.UPLOADS_MAX_AUDIO_BYTES


@dataclass
class LoggingConfig:
    """
    Logging configuration.

    Log levels:
        1 = MINIMAL: Errors and failed jobs only
        2 = NORMAL: Submissions, uploads, job outcomes (default)
        3 = VERBOSE: Every HTTP request and poll attempt
        4 = DEBUG: Raw payload shapes
    """
    text_preview_chars: int = Defaults.LOGGING_TEXT_PREVIEW_CHARS
    level: int = Defaults.LOGGING_LEVEL


@dataclass
class ClientConfig:
    """
    Validated configuration for FakeYouClient.

    Usage:
        settings = load_settings("config/fakeyou.yaml")
        config = ClientConfig.from_settings(settings)
        print(config.polling.max_attempts)
    """
    api: ApiConfig = field(default_factory=ApiConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    polling: PollingConfig = field(default_factory=PollingConfig)
    uploads: UploadsConfig = field(default_factory=UploadsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "ClientConfig":
        """
        Create ClientConfig from Settings with validation.

        Args:
            settings: Raw Settings object loaded from YAML.

        Returns:
            Validated ClientConfig instance.

        Raises:
            ConfigValidationError: If any value fails validation.
        """
        raw = settings.raw

        try:
            # ─────────────────────────────────────────────────────────────────
            # API configuration
            # ─────────────────────────────────────────────────────────────────
            api_raw = raw.get("api", {}) or {}
            api = ApiConfig(
                base_url=str(api_raw.get("base_url", Defaults.API_BASE_URL)).rstrip("/"),
                storage_base_url=str(
                    api_raw.get("storage_base_url", Defaults.API_STORAGE_BASE_URL)
                ).rstrip("/"),
                session_cookie=str(api_raw.get("session_cookie", Defaults.API_SESSION_COOKIE)),
            )

            # ─────────────────────────────────────────────────────────────────
            # HTTP configuration
            # ─────────────────────────────────────────────────────────────────
            http_raw = raw.get("http", {}) or {}
            http = HttpConfig(
                connect_timeout_s=float(http_raw.get("connect_timeout_s", Defaults.HTTP_CONNECT_TIMEOUT_S)),
                timeout_s=float(http_raw.get("timeout_s", Defaults.HTTP_TIMEOUT_S)),
                user_agent=str(http_raw.get("user_agent", Defaults.HTTP_USER_AGENT)),
            )

            # ─────────────────────────────────────────────────────────────────
            # Polling configuration
            # ─────────────────────────────────────────────────────────────────
            polling_raw = raw.get("polling", {}) or {}
            polling = PollingConfig(
                tts_interval_s=float(polling_raw.get("tts_interval_s", Defaults.POLLING_TTS_INTERVAL_S)),
                face_animation_interval_s=float(
                    polling_raw.get("face_animation_interval_s", Defaults.POLLING_FACE_ANIMATION_INTERVAL_S)
                ),
                backoff_multiplier=float(
                    polling_raw.get("backoff_multiplier", Defaults.POLLING_BACKOFF_MULTIPLIER)
                ),
                max_interval_s=float(polling_raw.get("max_interval_s", Defaults.POLLING_MAX_INTERVAL_S)),
                max_attempts=int(polling_raw.get("max_attempts", Defaults.POLLING_MAX_ATTEMPTS)),
                timeout_s=float(polling_raw.get("timeout_s", Defaults.POLLING_TIMEOUT_S)),
            )

            # ─────────────────────────────────────────────────────────────────
            # Upload limits
            # ─────────────────────────────────────────────────────────────────
            uploads_raw = raw.get("uploads", {}) or {}
            uploads = UploadsConfig(
                max_image_bytes=int(uploads_raw.get("max_image_bytes", Defaults.UPLOADS_MAX_IMAGE_BYTES)),
                max_audio_bytes=int(uploads_raw.get("max_audio_bytes", Defaults.UPLOADS_MAX_AUDIO_BYTES)),
            )

            # ─────────────────────────────────────────────────────────────────
            # Logging configuration
            # ─────────────────────────────────────────────────────────────────
            logging_raw = raw.get("logging", {}) or {}
            log_level_raw = logging_raw.get("level", Defaults.LOGGING_LEVEL)

            # String log levels (e.g., "INFO", "DEBUG")
            if isinstance(log_level_raw, str):
                level_map = {
                    "MINIMAL": 1, "1": 1,
                    "NORMAL": 2, "INFO": 2, "2": 2,
                    "VERBOSE": 3, "3": 3,
                    "DEBUG": 4, "TRACE": 4, "4": 4,
                }
                log_level = level_map.get(log_level_raw.upper(), Defaults.LOGGING_LEVEL)
            else:
                log_level = int(log_level_raw)

            logging_cfg = LoggingConfig(
                text_preview_chars=int(
                    logging_raw.get("text_preview_chars", Defaults.LOGGING_TEXT_PREVIEW_CHARS)
                ),
                level=log_level,
            )
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(f"invalid configuration value: {e}") from e

        cls._validate_url("api.base_url", api.base_url)
        cls._validate_url("api.storage_base_url", api.storage_base_url)
        if not api.session_cookie:
            raise ConfigValidationError("api.session_cookie must not be empty")

        cls._validate_positive("http.connect_timeout_s", http.connect_timeout_s)
        cls._validate_positive("http.timeout_s", http.timeout_s)

        cls._validate_non_negative("polling.tts_interval_s", polling.tts_interval_s)
        cls._validate_non_negative("polling.face_animation_interval_s", polling.face_animation_interval_s)
        cls._validate_range("polling.backoff_multiplier", polling.backoff_multiplier, 1.0, 10.0)
        cls._validate_non_negative("polling.max_interval_s", polling.max_interval_s)
        cls._validate_positive("polling.max_attempts", polling.max_attempts)
        cls._validate_positive("polling.timeout_s", polling.timeout_s)

        cls._validate_positive("uploads.max_image_bytes", uploads.max_image_bytes)
        cls._validate_positive("uploads.max_audio_bytes", uploads.max_audio_bytes)

        cls._validate_non_negative("logging.text_preview_chars", logging_cfg.text_preview_chars)
        cls._validate_range("logging.level", logging_cfg.level, 1, 4)

        return cls(
            api=api,
            http=http,
            polling=polling,
            uploads=uploads,
            logging=logging_cfg,
        )

    @staticmethod
    def _validate_positive(name: str, value: int | float) -> None:
        """Validate that a value is positive (> 0)."""
        if value <= 0:
            raise ConfigValidationError(f"{name} must be positive, got {value}")

    @staticmethod
    def _validate_non_negative(name: str, value: int | float) -> None:
        """Validate that a value is non-negative (>= 0)."""
        if value < 0:
            raise ConfigValidationError(f"{name} must be non-negative, got {value}")

    @staticmethod
    def _validate_range(name: str, value: int | float, min_val: int | float, max_val: int | float) -> None:
        """Validate that a value is within a range [min_val, max_val]."""
        if not (min_val <= value <= max_val):
            raise ConfigValidationError(f"{name} must be between {min_val} and {max_val}, got {value}")

    @staticmethod
    def _validate_url(name: str, value: str) -> None:
        """Validate that a value is an http(s) URL."""
        if not value.startswith(("http://", "https://")):
            raise ConfigValidationError(f"{name} must include an http/https scheme, got {value!r}")


@dataclass(frozen=True)
class Settings:
    """
    Immutable settings container loaded from YAML.

    This is the raw settings object before validation. Use
    get_client_config() to get a validated ClientConfig.

    Attributes:
        raw: Dictionary of raw configuration values.
    """
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def base_url(self) -> str:
        """Get the vendor API base URL."""
        return str((self.raw.get("api") or {}).get("base_url", Defaults.API_BASE_URL))

    @property
    def log_level(self) -> Any:
        """Get the raw configured log level."""
        return (self.raw.get("logging") or {}).get("level", Defaults.LOGGING_LEVEL)

    def get_client_config(self) -> ClientConfig:
        """
        Get validated ClientConfig from these settings.

        Raises:
            ConfigValidationError: If validation fails.
        """
        return ClientConfig.from_settings(self)


def _apply_env_overrides(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Apply FAKEYOU_* environment overrides onto a raw settings dict."""
    overrides = {
        "FAKEYOU_BASE_URL": ("api", "base_url"),
        "FAKEYOU_STORAGE_BASE_URL": ("api", "storage_base_url"),
        "FAKEYOU_POLL_TIMEOUT_S": ("polling", "timeout_s"),
        "FAKEYOU_POLL_MAX_ATTEMPTS": ("polling", "max_attempts"),
    }
    for env_name, (section, key) in overrides.items():
        value = os.getenv(env_name)
        if value:
            raw.setdefault(section, {})[key] = value
    return raw


def load_settings(path: Optional[str] = None, required: bool = False) -> Settings:
    """
    Load settings from a YAML configuration file.

    The file is optional: a client works with defaults alone. Pass
    required=True to fail when it is missing.

    Environment variable overrides:
        - FAKEYOU_SETTINGS: Settings file path (when path is None)
        - FAKEYOU_BASE_URL, FAKEYOU_STORAGE_BASE_URL
        - FAKEYOU_POLL_TIMEOUT_S, FAKEYOU_POLL_MAX_ATTEMPTS

    Args:
        path: Path to the YAML configuration file.
        required: Raise if the file does not exist.

    Returns:
        Settings object with loaded configuration.

    Raises:
        FileNotFoundError: If required and the settings file doesn't exist.
        ConfigValidationError: If the file is not valid YAML or not a mapping.
    """
    p = Path(path or os.getenv("FAKEYOU_SETTINGS", "config/fakeyou.yaml"))
    raw: Dict[str, Any] = {}

    if p.exists():
        with p.open("r", encoding="utf-8") as f:
            try:
                loaded = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigValidationError(f"invalid YAML in {p}: {e}") from e
        if not isinstance(loaded, dict):
            raise ConfigValidationError(f"settings file must contain a mapping: {p}")
        raw = loaded
    elif required:
        raise FileNotFoundError(f"settings file not found: {p.resolve()}")

    return Settings(raw=_apply_env_overrides(raw))
