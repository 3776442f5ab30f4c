from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Centralised engine configuration with type validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Groq (relationship extraction)
    groq_api_key: str = Field(default="")
    groq_model: str = Field(default="openai/gpt-oss-120b")
    extraction_temperature: float = Field(default=0.3, ge=0.0, le=1.0)
    llm_request_timeout: int = Field(default=60, ge=1, le=600)
    llm_max_retries: int = Field(default=3, ge=0, le=10)

    # Relational store
    database_url: str = Field(default="sqlite+aiosqlite:///./concept_graph.db")
    database_echo: bool = False
    auto_create_schema: bool = True

    # Graph build policy
    min_concepts_for_extraction: int = Field(default=2, ge=1, le=1000)
    clamp_strength: bool = False
    drop_self_references: bool = True

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"


@lru_cache
def get_settings() -> Settings:
    """Cached singleton so .env is not re-read on every request."""
    return Settings()


settings = get_settings()
