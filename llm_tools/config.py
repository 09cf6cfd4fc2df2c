"""Configuration for llm_tools, loaded from the environment (and ``.env``)."""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


# ============================================================================
# Environment helpers
# ============================================================================

def get_env(key: str, default: str) -> str:
    """Get string from environment, treating empty values as unset."""
    value = os.getenv(key)
    return value if value else default


def get_env_int(key: str, default: int) -> int:
    """Get integer from environment or return default."""
    value = os.getenv(key)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid {key}={value!r}, using default {default}")
        return default


def get_env_float(key: str, default: float) -> float:
    """Get float from environment or return default."""
    value = os.getenv(key)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Invalid {key}={value!r}, using default {default}")
        return default


# ============================================================================
# Settings
# ============================================================================

@dataclass(frozen=True)
class Settings:
    # OpenAI-compatible backend
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-3.5-turbo"
    openai_temperature: float = 0.7
    openai_max_tokens: int = 1000

    # Server
    server_host: str = "localhost"
    server_port: int = 8080

    # Logging
    log_level: str = "info"
    log_file: str = ""

    # Retrieval
    rag_max_results: int = 5

    # Timeouts (seconds)
    request_timeout: float = 30.0

    # Provider registry definitions
    providers_config: str = "config/providers.yaml"


def load_settings(dotenv: bool = True) -> Settings:
    """
    Build Settings from environment variables.

    Args:
        dotenv: Load a ``.env`` file from the working directory first

    Returns:
        Settings instance (never validated here, see validate_settings)
    """
    if dotenv and not load_dotenv():
        logger.debug(".env file not found, using environment variables")

    return Settings(
        openai_api_key=get_env("OPENAI_API_KEY", ""),
        openai_base_url=get_env("OPENAI_BASE_URL", "https://api.openai.com/v1"),
        openai_model=get_env("OPENAI_MODEL", "gpt-3.5-turbo"),
        openai_temperature=get_env_float("OPENAI_TEMPERATURE", 0.7),
        openai_max_tokens=get_env_int("OPENAI_MAX_TOKENS", 1000),
        server_host=get_env("SERVER_HOST", "localhost"),
        server_port=get_env_int("SERVER_PORT", 8080),
        log_level=get_env("LOG_LEVEL", "info"),
        log_file=get_env("LOG_FILE", ""),
        rag_max_results=get_env_int("RAG_MAX_RESULTS", 5),
        request_timeout=float(get_env_int("REQUEST_TIMEOUT_SECONDS", 30)),
        providers_config=get_env("PROVIDERS_CONFIG", "config/providers.yaml"),
    )


def validate_settings(settings: Settings) -> None:
    """
    Validate settings.

    Raises:
        ConfigurationError: On the first invalid value found
    """
    if not settings.openai_api_key:
        raise ConfigurationError("OPENAI_API_KEY is required")

    if settings.server_port <= 0 or settings.server_port > 65535:
        raise ConfigurationError(f"invalid server port: {settings.server_port}")

    if settings.openai_temperature < 0 or settings.openai_temperature > 2:
        raise ConfigurationError(f"invalid temperature: {settings.openai_temperature}")

    if settings.openai_max_tokens <= 0:
        raise ConfigurationError(f"invalid max tokens: {settings.openai_max_tokens}")
