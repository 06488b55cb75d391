# product_api/config.py
import json
from functools import lru_cache
from typing import Annotated, List, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    PROJECT_NAME: str = "Product API"
    API_PREFIX: str = ""

    # Any async SQLAlchemy URL, e.g. postgresql+asyncpg://postgres:postgres@db:5432/products
    DATABASE_URL: str = "sqlite+aiosqlite:///./products.db"
    DATABASE_ECHO: bool = False
    # Development convenience: create tables from the ORM mapping on startup
    CREATE_TABLES: bool = True

    # JSON list or comma-separated string
    CORS_ORIGINS: Annotated[List[str], NoDecode] = ["*"]

    LOG_LEVEL: str = "INFO"

    HOST: str = "0.0.0.0"
    PORT: int = 8000
    RELOAD: bool = False

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("["):
                return json.loads(v)
            return [i.strip() for i in v.split(",") if i.strip()]
        return v

    @field_validator("API_PREFIX")
    @classmethod
    def normalize_prefix(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = "/" + v
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings()

