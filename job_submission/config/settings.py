"""Typed runtime settings with dotenv support and startup validation."""

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Application settings for the session API and backend job service access.

    Environment variable names map directly to field names in uppercase.
    Example: `job_api_base_url` reads from `JOB_API_BASE_URL`.

    Attributes:
        environment_name: Runtime environment label.
        application_host: Host interface for web server binding.
        application_port: Web server port.
        job_api_base_url: HTTP(S) prefix of the backend job service API.
        job_api_request_timeout_seconds: Per-request timeout for backend calls.
        job_api_websocket_base_url: Optional WebSocket prefix for live job events.
        log_level: Root logging level name.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment_name: str = Field(default="development")
    application_host: str = Field(default="0.0.0.0")
    application_port: int = Field(default=8000, ge=1, le=65535)
    job_api_base_url: str = Field(min_length=1)
    job_api_request_timeout_seconds: float = Field(default=30.0, gt=0)
    job_api_websocket_base_url: str | None = Field(default=None)
    log_level: str = Field(default="INFO")

    @field_validator("job_api_base_url")
    @classmethod
    def _validate_base_url(cls, value: str) -> str:
        stripped_value = value.strip().rstrip("/")
        if not stripped_value:
            raise ValueError("value must not be blank")
        if not stripped_value.startswith(("http://", "https://")):
            raise ValueError("job_api_base_url must start with http:// or https://")
        return stripped_value

    @field_validator("job_api_websocket_base_url")
    @classmethod
    def _validate_websocket_base_url(cls, value: str | None) -> str | None:
        if value is None:
            return None
        stripped_value = value.strip().rstrip("/")
        if not stripped_value:
            return None
        if not stripped_value.startswith(("ws://", "wss://")):
            raise ValueError("job_api_websocket_base_url must start with ws:// or wss://")
        return stripped_value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized_value = value.strip().upper()
        if normalized_value not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError("log_level must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG")
        return normalized_value


def config_load_settings() -> AppSettings:
    """Load and validate runtime settings from environment and dotenv.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when required settings are missing or invalid.
    """

    try:
        return AppSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error
