"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    mapbox_access_token: str | None = None
    mapbox_base_url: str = "https://api.mapbox.com/geocoding/v5/mapbox.places"
    geocoder_timeout_seconds: float = 3.0
    require_vendor_approval: bool = True
    # Deprecated: lets pending vendors go live. Prefer require_vendor_approval.
    allow_auto_vendor_approval: bool = False
    force_start_duration_minutes: int = 120
    max_session_duration_minutes: int = 1440
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def resolve_approval_required(settings: Settings) -> bool:
    """Collapse the approval flags into one boolean.

    Approval is required unless it is switched off or the deprecated
    auto-approval flag is on.
    """
    return settings.require_vendor_approval and not settings.allow_auto_vendor_approval
