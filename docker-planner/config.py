from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # OpenAI
    openai_api_key: Optional[str] = None  # Required by the server, not the client
    openai_model: str = "gpt-4o"
    openai_temperature: float = 0.0

    # Docker
    docker_base_url: Optional[str] = None  # None means DOCKER_HOST / local socket

    # Plan execution
    plan_timeout_seconds: float = 30.0
    pull_timeout_seconds: float = 120.0

    # Prompts
    prompts_path: Optional[str] = None

    # Server
    host: str = "0.0.0.0"
    port: int = 1234
    debug: bool = False
    log_level: str = "INFO"

    # Client
    rpc_endpoint: str = "http://localhost:1234/rpc"
    client_timeout_seconds: float = 300.0

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    settings = Settings()
    logger.info(f"Settings loaded - OpenAI model: {settings.openai_model}")
    logger.info(
        f"Settings loaded - Plan timeout: {settings.plan_timeout_seconds}s, "
        f"pull timeout: {settings.pull_timeout_seconds}s"
    )
    return settings
