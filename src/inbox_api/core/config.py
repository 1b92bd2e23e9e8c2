"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Field names double as environment variable names (case-insensitive), so
    ``EMAIL``, ``PASSWORD``, ``HOST``, ``PORT``, ``TLS``, ``KEY`` and
    ``API_PORT`` map straight onto the fields below. Instances are frozen.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Application
    app_name: str = "Inbox API"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"

    # Shared mailbox (single account)
    email: str = Field(default="", description="Mailbox login")
    password: str = Field(default="", description="Mailbox password")
    host: str = Field(default="", description="IMAP server host")
    port: int = Field(default=993, description="IMAP server port")
    tls: bool = Field(default=True, description="Connect with implicit TLS")
    imap_folder: str = Field(default="INBOX", description="Folder searched for messages")

    # Security
    key: Optional[str] = Field(default=None, description="Shared secret expected in ?key=")
    cors_origins: str = "*"

    # API server
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    reload: bool = False

    # Allow-list
    domain_list_file: str = "domainlist.txt"

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"  # json or console
    log_file: Optional[str] = None

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        valid_formats = ["json", "console"]
        if v.lower() not in valid_formats:
            raise ValueError(f"Log format must be one of: {valid_formats}")
        return v.lower()

    @property
    def mailbox_configured(self) -> bool:
        return bool(self.host and self.email and self.password)


@lru_cache()
def get_settings() -> Settings:
    """Get application settings (cached)."""
    return Settings()


# Global settings instance
settings = get_settings()
