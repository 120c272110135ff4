from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Empty string means "not configured".
    cohere_api_key: str = ""
    cohere_api_url: str = "https://api.cohere.ai/v1/generate"
    cohere_model: str = "command-light"

    huggingface_api_key: str = ""
    huggingface_api_url: str = "https://api-inference.huggingface.co/models/microsoft/DialoGPT-medium"
    huggingface_model: str = "microsoft/DialoGPT-medium"

    catalog_url: str = "https://dummyjson.com/products"

    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000,http://localhost:8501"
    log_level: str = "INFO"

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip().rstrip("/") for o in self.cors_origins.split(",") if o.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
