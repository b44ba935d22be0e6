"""Configuration management using Pydantic Settings"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./ptz_gateway.db"

    # Service
    service_name: str = "ptz-gateway"
    log_level: str = "INFO"
    policy_version: str = "PTZ 2025"
    timezone: str = "Europe/Paris"

    # Admin surface (single shared credential)
    admin_username: str = "admin"
    admin_password: str = "change-me"

    # Store retry
    store_max_retries: int = 3
    store_backoff_base: float = 0.2  # Exponential backoff base in seconds

    # Confirmation email
    mail_enabled: bool = False
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_tls: bool = True
    mail_from: str = "PTZ <no-reply@example.com>"

    # Spreadsheet mirror
    sheets_webhook_url: Optional[str] = None

    # HTTP Client
    http_timeout_seconds: float = 5.0
    webhook_max_retries: int = 5
    webhook_backoff_base: float = 1.0

    # Export
    csv_delimiter: str = ";"


settings = Settings()
