from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Pocketbase
    pocketbase_url: str = "http://pocketbase:8090"
    pocketbase_admin_email: Optional[str] = None
    pocketbase_admin_password: Optional[str] = None

    # LLM Provider (presence of the key switches explanations to AI mode)
    openai_api_key: Optional[str] = None
    llm_model: str = "gpt-4o-mini"
    llm_max_tokens: int = 200

    # Explanation stream pacing
    progress_delay_seconds: float = 0.3
    demo_chunk_delay_seconds: float = 0.4

    # Demo data insertion
    demo_insert_enabled: bool = True
    demo_insert_interval_seconds: float = 24 * 60 * 60

    # App settings
    log_level: str = "INFO"

    @field_validator("pocketbase_url")
    @classmethod
    def pocketbase_url_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("POCKETBASE_URL is required and cannot be empty")
        return v

    @field_validator("demo_insert_interval_seconds")
    @classmethod
    def interval_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("DEMO_INSERT_INTERVAL_SECONDS must be positive")
        return v

    @property
    def ai_enabled(self) -> bool:
        """True when an OpenAI credential is configured."""
        return bool(self.openai_api_key and self.openai_api_key.strip())

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    return Settings()


# Singleton for convenient import
settings = get_settings()
