"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. SECRET_KEY is validated at load time; values are
passed into the token issuer, password hasher and mail sender at
construction, never read inside the account flows.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    # App
    app_name: str = "projectgrid"
    app_version: str = "1.0.0"
    debug: bool = False

    # Security
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"
    bcrypt_rounds: int = 12

    # Token lifetimes
    email_verification_ttl_minutes: int = 60
    password_reset_ttl_minutes: int = 10
    login_token_ttl_days: int = 7
    two_factor_ttl_minutes: int = 5

    # Links in emails point at the web client
    frontend_url: str = "http://localhost:5173"

    # Mail: "log" (development) or "sendgrid"
    mail_backend: str = "log"
    mail_from_address: str = "no-reply@projectgrid.local"
    mail_from_name: str = "ProjectGrid"
    sendgrid_api_key: SecretStr | None = None
    mail_timeout_seconds: float = 10.0

    # Registration guard: comma-separated domains refused at sign-up
    blocked_email_domains: str = ""

    # CORS
    allowed_origins: str = "http://localhost:5173,http://localhost:3000"

    # Request / middleware
    request_id_header: str = "X-Request-ID"
    rate_limit_enabled: bool = True

    # Firebase / Firestore: use key (env) or path (file).
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None

    # OpenTelemetry
    telemetry_enabled: bool = True
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def blocked_domains(self) -> frozenset[str]:
        """Normalized set of blocked registration domains."""
        return frozenset(
            d.strip().lower() for d in self.blocked_email_domains.split(",") if d.strip()
        )

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    @property
    def firestore_configured(self) -> bool:
        has_key = (
            self.firebase_service_account_key
            and self.firebase_service_account_key.get_secret_value()
        )
        return bool(has_key or self.firebase_service_account_path)

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate required env and the mail backend.

        - SECRET_KEY is always required.
        - SENDGRID_API_KEY is required when MAIL_BACKEND is 'sendgrid'.
        """
        if not self.secret_key.get_secret_value():
            raise ValueError(
                "SECRET_KEY is required. Generate with: openssl rand -hex 32."
            )
        if self.mail_backend == "sendgrid":
            has_key = (
                self.sendgrid_api_key and self.sendgrid_api_key.get_secret_value()
            )
            if not has_key:
                raise ValueError(
                    "SENDGRID_API_KEY is required when MAIL_BACKEND is 'sendgrid'."
                )
        elif self.mail_backend != "log":
            raise ValueError(
                f"mail_backend must be 'log' or 'sendgrid', got: {self.mail_backend!r}"
            )
        if self.bcrypt_rounds < 4 or self.bcrypt_rounds > 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.
    """
    return Settings()
