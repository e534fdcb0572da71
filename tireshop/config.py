"""Application configuration with environment variable validation."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Supabase (auth + quotes/appointments tables)
    supabase_url: str = Field(default="", validation_alias="SUPABASE_URL")
    supabase_key: str = Field(default="", validation_alias="SUPABASE_KEY")

    # NHTSA
    nhtsa_base_url: str = Field(
        default="https://vpic.nhtsa.dot.gov/api",
        validation_alias="NHTSA_BASE_URL",
    )

    # Transactional email (Resend)
    resend_api_key: str = Field(default="", validation_alias="RESEND_API_KEY")
    resend_base_url: str = Field(
        default="https://api.resend.com",
        validation_alias="RESEND_BASE_URL",
    )
    email_from: str = Field(
        default="Wheels & Deals Auto & Services <onboarding@resend.dev>",
        validation_alias="EMAIL_FROM",
    )
    admin_email: str = Field(default="", validation_alias="ADMIN_EMAIL")
    email_timeout: float = Field(default=20.0, validation_alias="EMAIL_TIMEOUT")

    # Shop details used in customer-facing emails
    shop_name: str = Field(
        default="Wheels & Deals Auto & Services",
        validation_alias="SHOP_NAME",
    )
    shop_phone: str = Field(default="(614) 879-9212", validation_alias="SHOP_PHONE")
    shop_address: str = Field(
        default="123 Main Street, Columbus, OH 43026",
        validation_alias="SHOP_ADDRESS",
    )
    dashboard_url: str = Field(
        default="https://wheelsdealsauto.com/admin",
        validation_alias="DASHBOARD_URL",
    )

    # Quote reference numbers: PREFIX-YYYYMMDD-RRRR
    reference_prefix: str = Field(default="TS", validation_alias="REFERENCE_PREFIX")

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # CORS
    # Comma-separated list, e.g. "http://localhost:5173,https://shop.example.com"
    allowed_origins: str = Field(default="*", validation_alias="ALLOWED_ORIGINS")

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


def validate_settings() -> None:
    """Validate that the settings needed to serve traffic are present."""
    settings = get_settings()
    errors = []

    if not settings.supabase_url:
        errors.append("SUPABASE_URL is required")
    if not settings.supabase_key:
        errors.append("SUPABASE_KEY is required")
    if not settings.resend_api_key:
        errors.append("RESEND_API_KEY is required")

    if errors:
        raise ValueError(f"Configuration errors: {'; '.join(errors)}")
