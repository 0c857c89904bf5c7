"""Tests for credential resolution and client configuration."""
import pytest

from sophrosyne.core.config import (
    API_KEY_PLACEHOLDER,
    ClientConfig,
    RetryPolicy,
    Settings,
    client_config_from_settings,
    is_api_key_configured,
    mask_api_key,
    resolve_api_key,
)


def test_environment_wins(monkeypatch):
    monkeypatch.setenv("GROK_API_KEY", "env-key")
    assert resolve_api_key("packaged-key") == "env-key"


def test_packaged_value_second(monkeypatch):
    monkeypatch.delenv("GROK_API_KEY", raising=False)
    assert resolve_api_key("packaged-key") == "packaged-key"


def test_placeholder_last(monkeypatch):
    monkeypatch.delenv("GROK_API_KEY", raising=False)
    assert resolve_api_key("") == API_KEY_PLACEHOLDER
    assert not is_api_key_configured(resolve_api_key(""))


def test_is_configured():
    assert is_api_key_configured("xai-123")
    assert not is_api_key_configured("")
    assert not is_api_key_configured("your_key_here")


def test_mask():
    assert mask_api_key("abcd") == "****"
    assert mask_api_key("xai-1234567890") == "xai-******7890"


def test_retry_policy_defaults_and_bounds():
    p = RetryPolicy()
    assert (p.max_attempts, p.delay_seconds) == (3, 1.0)
    with pytest.raises(ValueError):
        RetryPolicy(max_attempts=0)
    with pytest.raises(ValueError):
        RetryPolicy(delay_seconds=-1)


def test_client_config_from_settings(monkeypatch):
    monkeypatch.delenv("GROK_API_KEY", raising=False)
    s = Settings(
        _env_file=None,
        GROK_API_KEY="from-settings",
        GROK_BASE_URL="https://example.test/v1/",
        MAX_ATTEMPTS=4,
        RETRY_DELAY_SECONDS=0.5,
    )
    cfg = client_config_from_settings(s)
    assert cfg.api_key == "from-settings"
    assert cfg.chat_url == "https://example.test/v1/chat/completions"
    assert cfg.retry == RetryPolicy(max_attempts=4, delay_seconds=0.5)
    assert cfg.model == "grok-3-mini"
    assert cfg.is_api_key_configured


def test_client_config_is_immutable():
    cfg = ClientConfig(api_key="k")
    with pytest.raises(Exception):
        cfg.api_key = "other"
