"""Settings for document generation, read from SCHEMA_BRIDGE_* environment variables or .env."""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SCHEMA_BRIDGE_", env_file=".env", extra="ignore")

    # Used to fill info/servers when the document shell leaves them unset
    app_name: str = "API Backend"
    api_version: str = "v1"
    port: int = Field(default=3000, ge=1, le=65535)

    log_level: str = "INFO"
    output_format: str = "yaml"  # yaml / json

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        upper = v.upper()
        if upper not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {', '.join(LOG_LEVELS)}")
        return upper

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, v: str) -> str:
        lower = v.lower()
        if lower not in ("yaml", "json"):
            raise ValueError(f"Invalid output_format '{v}'. Must be 'yaml' or 'json'")
        return lower


@lru_cache
def get_settings() -> Settings:
    return Settings()
