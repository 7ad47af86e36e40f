"""Environment-driven configuration with Pydantic v2."""

from functools import lru_cache
from typing import Literal, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Client settings driven by DEVRELAY_* environment variables."""

    # Relay control plane
    api_url: str = Field(default="https://api.fitbit.com")
    access_token: Optional[str] = Field(default=None)
    http_timeout: float = Field(default=30.0, ge=1.0, le=300.0)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: Literal["console", "json"] = Field(default="console")
    log_file: Optional[str] = Field(default=None)

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v):
        """Only http(s) control plane URLs are usable by the API client."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("api_url must be an http:// or https:// URL")
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    model_config = {
        "env_prefix": "DEVRELAY_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
        "env_parse_none_str": "none",
    }


@lru_cache
def get_settings() -> Settings:
    """Resolve settings from the environment once per process."""
    return Settings()
