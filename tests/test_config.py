# tests/test_config.py
import pytest
from pydantic import ValidationError

from support_desk.core.config import Settings


def test_missing_store_settings_fail_fast(monkeypatch):
    monkeypatch.delenv("UPSTASH_REDIS_REST_URL", raising=False)
    monkeypatch.delenv("UPSTASH_REDIS_REST_TOKEN", raising=False)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_missing_token_fails(monkeypatch):
    monkeypatch.setenv("UPSTASH_REDIS_REST_URL", "https://store.test")
    monkeypatch.delenv("UPSTASH_REDIS_REST_TOKEN", raising=False)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("UPSTASH_REDIS_REST_URL", "https://store.test")
    monkeypatch.setenv("UPSTASH_REDIS_REST_TOKEN", "tok")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, https://desk.example.com")

    settings = Settings(_env_file=None)
    assert settings.STORE_TIMEOUT == 10.0
    assert settings.cors_origins == ["http://localhost:3000", "https://desk.example.com"]


def test_cors_defaults_to_any(monkeypatch):
    monkeypatch.setenv("UPSTASH_REDIS_REST_URL", "https://store.test")
    monkeypatch.setenv("UPSTASH_REDIS_REST_TOKEN", "tok")
    monkeypatch.delenv("CORS_ORIGINS", raising=False)

    assert Settings(_env_file=None).cors_origins == ["*"]
