"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with CLUBDESK_ prefix.
A local .env file is read when present; nothing else is file-based.

Learn: the session file (session_path) is NOT config — it is the
client's stand-in for browser local storage and is owned by
clubdesk.auth.session.
"""

from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """All client configuration. Set via CLUBDESK_* env vars."""

    # Backend REST API
    api_base_url: str = "http://localhost:3333/api"
    request_timeout: float = 30.0  # seconds, single attempt per request

    # Supabase realtime
    supabase_url: str = ""
    supabase_anon_key: str = ""

    # Local identity store
    session_path: Path = Path.home() / ".clubdesk" / "session.json"

    # Environment + logging
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    json_logs: bool = False

    # Fallback polling layered on top of realtime invalidation
    notification_poll_seconds: float = 30.0
    chat_poll_seconds: float = 10.0
    credit_poll_seconds: float = 10.0

    # Uploads (KYC documents, notification media)
    max_upload_bytes: int = 5 * 1024 * 1024
    allowed_document_types: list[str] = [
        "image/jpeg",
        "image/jpg",
        "image/png",
        "application/pdf",
    ]

    model_config = SettingsConfigDict(
        env_prefix="CLUBDESK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Refuse to talk to a local backend outside development."""
        if self.environment != "development" and (
            "localhost" in self.api_base_url or "127.0.0.1" in self.api_base_url
        ):
            raise ValueError(
                "CLUBDESK_API_BASE_URL must point at a deployed backend in "
                "non-development environments."
            )
        return self


# Module-level singleton; import this everywhere
settings = Settings()
