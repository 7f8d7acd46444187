"""
Configuration settings for the Car Wash Management System.
Uses Pydantic for type-safe configuration management.
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Car Wash Management System"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = "postgresql+asyncpg://carwash_user:carwash_pass@db:5432/carwash_db"
    database_echo: bool = False

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:8000"]

    # SMS (Kudisms)
    kudisms_url: str = "https://my.kudisms.net/api/otp"
    kudisms_token: str = ""
    kudisms_sender_id: str = ""

    # Email (SendGrid)
    sendgrid_url: str = "https://api.sendgrid.com/v3/mail/send"
    sendgrid_api_key: str = ""
    sendgrid_from_email: str = "noreply@carwash.local"

    # Outbound HTTP
    notification_timeout: int = 20
    frontend_url: str = "http://localhost:3000"

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
