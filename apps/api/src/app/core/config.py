"""
Application Configuration

Environment-driven settings for the internship application API.

Settings are intentionally NOT cached: every request builds a fresh
``Settings`` instance through ``get_settings`` so that rotated SMTP
credentials or a changed recipient take effect without a restart.
Tests override ``get_settings`` through ``app.dependency_overrides``.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_LOGO_PATH = Path("public") / "logo.png"


class Settings(BaseSettings):
    """Runtime configuration read from the process environment (and .env)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    python_env: str = "development"
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000"

    # SMTP relay
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_secure: bool = False
    smtp_user: str | None = None
    smtp_pass: str | None = None
    smtp_timeout: float = Field(60.0, gt=0)
    recipient_email: str | None = None

    # Branding
    logo_path: Path = DEFAULT_LOGO_PATH

    @property
    def is_development(self) -> bool:
        return self.python_env == "development"

    @property
    def is_production(self) -> bool:
        return self.python_env == "production"

    @property
    def cors_origins_list(self) -> list[str]:
        """CORS origins as a list, split from the comma separated env value."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def smtp_configured(self) -> bool:
        """True when both SMTP credentials are present and non-empty."""
        return bool(self.smtp_user) and bool(self.smtp_pass)

    @property
    def effective_recipient(self) -> str | None:
        """Recipient mailbox, falling back to the SMTP user."""
        return self.recipient_email or self.smtp_user


def get_settings() -> Settings:
    """
    Build settings from the current environment.

    Usage in FastAPI:
        @router.post("/submit-form")
        async def submit(settings: Settings = Depends(get_settings)):
            ...
    """
    return Settings()


# Process-start snapshot, used only for app wiring (CORS, docs, logging).
settings = get_settings()
