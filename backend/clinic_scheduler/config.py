from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Database
    database_url: str = Field(default="sqlite+aiosqlite:///./clinic.db")
    database_echo: bool = Field(default=False)
    create_tables_on_startup: bool = Field(default=True)

    # Auth
    jwt_secret_key: str = Field(default="change-me-in-production")
    token_expire_seconds: int = Field(default=86400, ge=60)
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # Appointment rules
    # When enabled, COMPLETED / CANCELLED / NO_SHOW appointments can no longer change status
    enforce_status_transitions: bool = Field(default=False)

    # HTTP
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = Field(default="INFO")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
