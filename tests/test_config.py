"""Tests for environment configuration."""

import pytest

from aicr.utils import config as config_module
from aicr.utils.config import (
    DEFAULT_BASE_URL,
    DEFAULT_MAX_ROUNDS,
    DEFAULT_MODEL,
    get_config,
    load_config,
)


def test_missing_api_key_is_fatal(monkeypatch, no_dotenv):
    monkeypatch.delenv("DEEPSEEK_API_KEY", raising=False)

    with pytest.raises(ValueError, match="DEEPSEEK_API_KEY"):
        load_config()


def test_empty_api_key_is_fatal(monkeypatch, no_dotenv):
    monkeypatch.setenv("DEEPSEEK_API_KEY", "")

    with pytest.raises(ValueError):
        load_config()


def test_defaults(api_env):
    config = load_config()

    assert config.model.api_key == "test-key"
    assert config.model.base_url == DEFAULT_BASE_URL
    assert config.model.name == DEFAULT_MODEL
    assert config.model.request_timeout_seconds == 300
    assert config.agent.max_rounds == DEFAULT_MAX_ROUNDS == 100
    assert config.agent.review_timeout is None


def test_overrides(api_env, monkeypatch):
    monkeypatch.setenv("AICR_MAX_ROUNDS", "7")
    monkeypatch.setenv("AICR_REVIEW_TIMEOUT_SECONDS", "90")
    monkeypatch.setenv("AICR_BASE_URL", "http://localhost:8000/v1/")

    config = load_config()

    assert config.agent.max_rounds == 7
    assert config.agent.review_timeout == 90.0
    assert config.model.base_url == "http://localhost:8000/v1"


@pytest.mark.parametrize("value", ["many", "0", "-3"])
def test_invalid_round_budget_falls_back(api_env, monkeypatch, value):
    monkeypatch.setenv("AICR_MAX_ROUNDS", value)

    assert load_config().agent.max_rounds == DEFAULT_MAX_ROUNDS


def test_config_is_cached(api_env, monkeypatch):
    first = get_config()
    monkeypatch.setenv("AICR_MODEL", "other")

    assert get_config() is first

    config_module.reset_config()
    assert get_config().model.name == "other"


def test_config_is_immutable(api_env):
    config = load_config()

    with pytest.raises(AttributeError):
        config.agent.max_rounds = 1
