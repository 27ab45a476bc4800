"""Configuration settings for SiteCMS."""

import os
import secrets
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./sitecms.db")

    # JWT
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRE_MINUTES: int = int(os.getenv("JWT_EXPIRE_MINUTES", str(7 * 24 * 60)))

    # Password reset
    PASSWORD_RESET_EXPIRE_MINUTES: int = int(os.getenv("PASSWORD_RESET_EXPIRE_MINUTES", "10"))
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")

    # Mail
    SMTP_HOST: str | None = os.getenv("SMTP_HOST")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USERNAME: str | None = os.getenv("SMTP_USERNAME")
    SMTP_PASSWORD: str | None = os.getenv("SMTP_PASSWORD")
    SMTP_USE_TLS: bool = os.getenv("SMTP_USE_TLS", "true").lower() == "true"
    SMTP_FROM_EMAIL: str | None = os.getenv("SMTP_FROM_EMAIL")
    SMTP_FROM_NAME: str = os.getenv("SMTP_FROM_NAME", "SiteCMS")

    # Media storage
    MEDIA_BACKEND: str = os.getenv("MEDIA_BACKEND", "local")  # local, s3
    AWS_REGION: str | None = os.getenv("AWS_REGION")
    AWS_BUCKET_NAME: str | None = os.getenv("AWS_BUCKET_NAME")
    AWS_ACCESS_KEY_ID: str | None = os.getenv("AWS_ACCESS_KEY_ID")
    AWS_SECRET_ACCESS_KEY: str | None = os.getenv("AWS_SECRET_ACCESS_KEY")
    UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", "uploads")
    MAX_UPLOAD_SIZE_MB: int = int(os.getenv("MAX_UPLOAD_SIZE_MB", "100"))

    # Application
    APP_ENV: str = os.getenv("APP_ENV", "development")
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "5000"))
    ALLOWED_ORIGINS: list[str] = [
        origin.strip() for origin in os.getenv("ALLOWED_ORIGINS", "").split(",") if origin.strip()
    ]

    def __init__(self) -> None:
        self._generated_secret = not self.JWT_SECRET_KEY
        if self._generated_secret:
            self.JWT_SECRET_KEY = secrets.token_urlsafe(32)

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def smtp_configured(self) -> bool:
        return all([self.SMTP_HOST, self.SMTP_USERNAME, self.SMTP_PASSWORD, self.SMTP_FROM_EMAIL])

    @property
    def cors_origins(self) -> list[str]:
        origins = [self.FRONTEND_URL.rstrip("/")]
        origins.extend(o.rstrip("/") for o in self.ALLOWED_ORIGINS if o.rstrip("/") not in origins)
        return origins

    def validate(self) -> list[str]:
        """Validate settings and return list of warnings."""
        errors = []
        if self._generated_secret:
            errors.append("JWT_SECRET_KEY is not set - using auto-generated key (not persistent across restarts)")
        if self.MEDIA_BACKEND == "s3" and not (self.AWS_BUCKET_NAME and self.AWS_REGION):
            errors.append("MEDIA_BACKEND is 's3' but AWS_BUCKET_NAME or AWS_REGION is not set")
        if self.MEDIA_BACKEND not in ("s3", "local"):
            errors.append(f"Unknown MEDIA_BACKEND '{self.MEDIA_BACKEND}' - falling back to local storage")
        if not self.smtp_configured:
            errors.append("SMTP is not fully configured - password reset emails will be logged instead of sent")
        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
