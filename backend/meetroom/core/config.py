"""Application settings for the meeting server runtime and tests."""

from __future__ import annotations

from pydantic import Field
from pydantic import model_validator
from pydantic_settings import BaseSettings

# Browsers cap shares at 5 MiB of raw bytes; base64 data URLs grow by 4/3.
DEFAULT_MAX_FILE_SHARE_BYTES = 7 * 1024 * 1024


class Settings(BaseSettings):
    """Typed settings loaded from environment variables or explicit kwargs."""

    meetroom_app_host: str = "127.0.0.1"
    meetroom_app_port: int = Field(default=3000, ge=1, le=65535)
    meetroom_log_level: str = "INFO"

    meetroom_cors_allow_origins: str = "*"
    meetroom_static_dir: str | None = None

    meetroom_heartbeat_interval_seconds: float = Field(default=30.0, gt=0)
    meetroom_pong_timeout_seconds: float = Field(default=10.0, gt=0)
    meetroom_max_missed_pongs: int = Field(default=2, ge=1)

    meetroom_max_file_share_bytes: int = Field(default=DEFAULT_MAX_FILE_SHARE_BYTES, ge=0)

    @model_validator(mode="after")
    def validate_heartbeat_window(self) -> "Settings":
        """Ensure a pong can arrive before the next ping is due."""
        if self.meetroom_pong_timeout_seconds >= self.meetroom_heartbeat_interval_seconds:
            raise ValueError(
                "MEETROOM_PONG_TIMEOUT_SECONDS must be less than "
                "MEETROOM_HEARTBEAT_INTERVAL_SECONDS"
            )
        return self

    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.meetroom_cors_allow_origins.split(",") if origin.strip()]


def load_settings() -> Settings:
    """Load settings from process environment."""
    return Settings()
