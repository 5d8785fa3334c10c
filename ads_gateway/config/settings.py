"""
Application Settings
===================

Application settings and vendor credentials loaded from the environment using
Pydantic Settings. A ``Settings`` value is immutable: it is built once at
startup by ``load_settings`` and handed to every collaborator that needs it.
"""

from typing import Optional

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""


LIVE_BACKEND_CREDENTIALS = (
    "facebook_app_id",
    "facebook_app_secret",
    "facebook_access_token",
    "facebook_account_id",
)


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    # Application Configuration
    app_name: str = Field(default="Ads Tools Gateway", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3000, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")

    # Ads Backend Configuration
    ads_backend: str = Field(default="live", description="Ads backend: mock or live")
    facebook_app_id: Optional[str] = Field(default=None, description="Facebook app ID")
    facebook_app_secret: Optional[str] = Field(default=None, description="Facebook app secret")
    facebook_access_token: Optional[str] = Field(
        default=None, description="Facebook Marketing API access token"
    )
    facebook_account_id: Optional[str] = Field(
        default=None, description="Ad account ID, with or without the act_ prefix"
    )
    facebook_api_version: Optional[str] = Field(
        default=None, description="Graph API version pin, e.g. v19.0"
    )

    # SSE Configuration
    sse_time_interval_seconds: float = Field(
        default=5.0, gt=0, description="Interval between time events on generic streams"
    )
    sse_heartbeat_interval_seconds: float = Field(
        default=30.0, gt=0, description="Interval between heartbeats on the tool stream"
    )
    sse_max_connections: int = Field(default=100, ge=1, description="Maximum SSE connections")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("ads_backend")
    @classmethod
    def validate_ads_backend(cls, v: str) -> str:
        """Validate ads backend kind."""
        v = v.lower()
        if v not in {"mock", "live"}:
            raise ValueError("Ads backend must be 'mock' or 'live'")
        return v

    @model_validator(mode="after")
    def require_live_credentials(self) -> "Settings":
        """The live backend cannot start without every Facebook credential."""
        if self.ads_backend == "live":
            missing = [name.upper() for name in LIVE_BACKEND_CREDENTIALS if not getattr(self, name)]
            if missing:
                raise ValueError(
                    f"Missing required environment variables: {', '.join(missing)}"
                )
        return self

    @property
    def ad_account_id(self) -> Optional[str]:
        """Ad account ID in the act_<id> form the SDK expects."""
        if not self.facebook_account_id:
            return None
        if self.facebook_account_id.startswith("act_"):
            return self.facebook_account_id
        return f"act_{self.facebook_account_id}"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )


def load_settings(**overrides: object) -> Settings:
    """
    Build settings from the environment.

    Args:
        overrides: Explicit field values taking precedence over the environment

    Returns:
        Validated, immutable settings

    Raises:
        ConfigurationError: If required configuration is missing or invalid
    """
    try:
        return Settings(**overrides)  # type: ignore[arg-type]
    except ValidationError as e:
        messages = "; ".join(error["msg"] for error in e.errors())
        raise ConfigurationError(messages) from e
