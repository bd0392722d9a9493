from functools import lru_cache
import json
from typing import Optional

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors_origins(value: str) -> list[str]:
    if not value:
        return []

    parsed: list[str]
    raw = value.strip()
    if raw.startswith("["):
        try:
            items = json.loads(raw)
            parsed = [str(item).strip() for item in items if str(item).strip()]
        except (TypeError, ValueError):
            parsed = []
    else:
        parsed = [origin.strip() for origin in raw.split(",") if origin.strip()]

    # Preserve order and remove duplicates.
    return list(dict.fromkeys(parsed))


def parse_email_list(value: str) -> list[str]:
    return list(dict.fromkeys(item.strip().lower() for item in (value or "").split(",") if item.strip()))


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_name: str = "EduMate Admin"
    environment: str = "development"
    api_v1_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Security
    secret_key: str
    access_token_expire_minutes: int = 30
    refresh_token_expire_days: int = 7
    password_bcrypt_rounds: int = 12

    # Database
    database_url: str
    db_pool_size: int = Field(5, ge=1)
    db_max_overflow: int = Field(5, ge=0)
    db_pool_timeout: int = Field(15, ge=1)
    db_pool_recycle: int = 1200
    db_pool_pre_ping: bool = True

    # Paystack
    paystack_secret_key: str
    paystack_webhook_secret: Optional[str] = None
    paystack_base_url: AnyHttpUrl = "https://api.paystack.co"
    paystack_timeout_seconds: int = 15

    # Frontend URLs (payment callback, email links)
    frontend_base_url: str = "http://localhost:3000"

    # Email (contact form)
    email_provider: str = "console"  # console|resend|smtp|brevo
    email_from: str = "EduMate GH <noreply@edumategh.com>"
    contact_recipients: str = "edumategh@gmail.com"

    # Resend
    resend_api_key: Optional[str] = None

    # Brevo
    brevo_api_key: Optional[str] = None

    # SMTP
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_tls: bool = True

    # CORS
    cors_origins: str = "http://localhost:3000"
    auto_create_tables: bool = False
    rate_limit_enabled: bool = True

    # Ops: promote existing users to admin at startup (comma-separated emails).
    bootstrap_admin_emails: str = ""


@lru_cache
def get_settings() -> Settings:
    return Settings()
