"""Deployment settings for the proxy, read from the environment or ``.env``."""

import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

GATEWAY_CHAT_COMPLETIONS_URL = "https://ai.gateway.lovable.dev/v1/chat/completions"
GATEWAY_MODEL = "google/gemini-2.5-flash"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        populate_by_name=True,
    )

    # Left empty on purpose: the app still starts and each request fails with
    # a configuration error until the key is provided.
    lovable_api_key: str = Field(default="", validation_alias="LOVABLE_API_KEY")

    gateway_url: str = Field(
        default=GATEWAY_CHAT_COMPLETIONS_URL, validation_alias="AI_CODE_GATEWAY_URL"
    )
    model: str = Field(default=GATEWAY_MODEL, validation_alias="AI_CODE_MODEL")
    # None means no proxy-imposed limit on the gateway call or the stream.
    upstream_timeout: Optional[float] = Field(
        default=None, validation_alias="AI_CODE_UPSTREAM_TIMEOUT"
    )

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


__all__ = [
    "GATEWAY_CHAT_COMPLETIONS_URL",
    "GATEWAY_MODEL",
    "Settings",
    "configure_logging",
    "get_settings",
]
