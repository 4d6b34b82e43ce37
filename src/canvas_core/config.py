"""Application settings loaded from the environment."""
import json
from functools import lru_cache
from typing import Annotated, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_CORS_ORIGINS = [
    "https://claude.ai",
    "https://api.claude.ai",
    "https://limitless-canvas12.vercel.app",
]


class Settings(BaseSettings):
    """Process configuration.

    Either ``database_url`` (direct SQL access) or the Supabase URL and
    service role key pair (REST access) must be provided.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    supabase_url: Optional[str] = None
    supabase_service_role_key: Optional[str] = None
    database_url: Optional[str] = None
    default_workspace_id: Optional[str] = None

    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: Annotated[list[str], NoDecode] = DEFAULT_CORS_ORIGINS
    log_level: str = "INFO"
    request_timeout: float = 30.0

    @field_validator("default_workspace_id", "database_url", "supabase_url", mode="before")
    @classmethod
    def _blank_as_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value):
        # CORS_ORIGINS may be a JSON array or a comma-separated list
        if isinstance(value, str):
            if value.lstrip().startswith("["):
                return json.loads(value)
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


@lru_cache
def get_settings() -> Settings:
    """Return the cached process settings."""
    return Settings()
