import json
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, cast

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_ENV_FILE = Path(__file__).parent.parent / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=_ENV_FILE, extra="ignore")

    HASURA_GRAPHQL_URL: str
    HASURA_ADMIN_SECRET: str | None = None
    HASURA_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)
    JWT_SECRET: str
    JWT_EXPIRE_MINUTES: int = Field(default=60, ge=1)
    # JSON list or comma-separated; NoDecode keeps env values as raw strings.
    CORS_ORIGINS: Annotated[list[str], NoDecode]
    COMMENT_MAX_LENGTH: int = Field(default=500, ge=1)
    COMMENT_FLOOD_SECONDS: int = Field(default=5, ge=0)
    COMMENT_MAX_REPLIES: int = Field(default=5, ge=1)  # per user, per parent review
    MAX_PAGE_SIZE: int = Field(default=50, ge=1, le=200)

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, value: Any) -> list[str]:
        if isinstance(value, str):
            raw = value.strip()
            value = json.loads(raw) if raw.startswith("[") else raw.split(",")
        if not isinstance(value, list):
            raise ValueError("CORS_ORIGINS must be a list or comma-separated string.")

        origins = [str(origin).strip().rstrip("/") for origin in value]
        origins = [origin for origin in origins if origin]
        if not origins:
            raise ValueError("CORS_ORIGINS must include at least one origin.")
        return list(dict.fromkeys(origins))

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, value: str) -> str:
        if len(value.encode("utf-8")) < 32:
            raise ValueError("JWT_SECRET must be at least 32 bytes for HS256.")
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


class _LazySettings:
    def __getattr__(self, item: str) -> Any:
        return getattr(get_settings(), item)


settings = cast(Settings, _LazySettings())
