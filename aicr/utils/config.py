"""
Configuration Management
========================

All environment variables used by the reviewer are read, validated and
typed here. A missing API key is a startup error: ``load_config()`` raises
before any review is attempted.

Environment:
    DEEPSEEK_API_KEY               Bearer token for the chat endpoint (required)
    AICR_BASE_URL                  Endpoint prefix, requests go to <base>/chat/completions
    AICR_MODEL                     Model name sent with every request
    AICR_REQUEST_TIMEOUT_SECONDS   Timeout for a single remote call
    AICR_MAX_ROUNDS                Maximum model calls per review
    AICR_REVIEW_TIMEOUT_SECONDS    Overall deadline per review, 0 disables it
    LOG_LEVEL                      debug, info, warning or error

Usage:
    from aicr.utils.config import get_config

    config = get_config()
    print(config.model.name)
    print(config.agent.max_rounds)
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from aicr.utils.logger import Logger

logger = Logger("Config")

DEFAULT_BASE_URL = "https://api.deepseek.com/v1"
DEFAULT_MODEL = "deepseek-chat"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 300
DEFAULT_MAX_ROUNDS = 100


def _required(name: str) -> str:
    """
    Get a required environment variable.

    Raises:
        ValueError: If the variable is not set or empty
    """
    value = os.getenv(name)
    if not value:
        raise ValueError(
            f"Missing required environment variable: {name}\n"
            f"Set it with: export {name}=your-api-key"
        )
    return value


def _optional(name: str, default: str) -> str:
    return os.getenv(name) or default


def _optional_int(name: str, default: int, minimum: int = 0) -> int:
    """
    Get an optional integer environment variable.

    Values that are not integers, or are below ``minimum``, fall back to
    the default with a warning.
    """
    value = os.getenv(name)
    if not value:
        return default
    try:
        parsed = int(value)
    except ValueError:
        logger.warning(f"{name} is not a valid integer, using default: {default}")
        return default
    if parsed < minimum:
        logger.warning(f"{name} must be >= {minimum}, using default: {default}")
        return default
    return parsed


# ==============================================================================
# Configuration Dataclasses
# ==============================================================================

@dataclass(frozen=True)
class ModelConfig:
    """Remote chat-completion endpoint configuration."""
    api_key: str
    base_url: str
    name: str
    request_timeout_seconds: int


@dataclass(frozen=True)
class AgentConfig:
    """Agent loop limits."""
    max_rounds: int
    review_timeout_seconds: int  # 0 means no deadline

    @property
    def review_timeout(self) -> float | None:
        return float(self.review_timeout_seconds) if self.review_timeout_seconds else None


@dataclass(frozen=True)
class Config:
    """
    Root configuration object.

    Access via:
        config = get_config()
        config.model.api_key
        config.agent.max_rounds
    """
    model: ModelConfig
    agent: AgentConfig
    log_level: str


def load_config() -> Config:
    """
    Load and validate configuration from the environment and any .env file.

    Raises:
        ValueError: If DEEPSEEK_API_KEY is missing
    """
    load_dotenv()

    return Config(
        model=ModelConfig(
            api_key=_required("DEEPSEEK_API_KEY"),
            base_url=_optional("AICR_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
            name=_optional("AICR_MODEL", DEFAULT_MODEL),
            request_timeout_seconds=_optional_int(
                "AICR_REQUEST_TIMEOUT_SECONDS", DEFAULT_REQUEST_TIMEOUT_SECONDS, minimum=1
            ),
        ),
        agent=AgentConfig(
            max_rounds=_optional_int("AICR_MAX_ROUNDS", DEFAULT_MAX_ROUNDS, minimum=1),
            review_timeout_seconds=_optional_int("AICR_REVIEW_TIMEOUT_SECONDS", 0),
        ),
        log_level=_optional("LOG_LEVEL", "info"),
    )


# ==============================================================================
# Singleton
# ==============================================================================

_config_instance: Config | None = None


def get_config() -> Config:
    """Get the configuration, loading it on first access."""
    global _config_instance
    if _config_instance is None:
        _config_instance = load_config()
    return _config_instance


def reset_config() -> None:
    """Forget the cached configuration so the next access reloads it."""
    global _config_instance
    _config_instance = None
