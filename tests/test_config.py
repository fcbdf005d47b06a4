"""Tests for environment-driven settings."""
from __future__ import annotations

from pathlib import Path

import pytest

from tasksaver.config import DEFAULT_ORIGINS, DEV_JWT_SECRET, ConfigError, load_settings

ENV_VARS = [
    "TASKSAVER_ENV",
    "TASKSAVER_JWT_SECRET",
    "TASKSAVER_STORE_BACKEND",
    "TASKSAVER_STORE_FORCE_FILE",
    "TASKSAVER_DATA_DIR",
    "TASKSAVER_CACHE_DIR",
    "TASKSAVER_ALLOWED_ORIGINS",
    "TASKSAVER_REQUEST_TIMEOUT",
    "TASKSAVER_TOKEN_TTL_DAYS",
    "TASKSAVER_DATA_MODE",
    "TASKSAVER_FALLBACK_POLICY",
    "TASKSAVER_API_URL",
    "TASKSAVER_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


class TestLoadSettings:
    def test_defaults(self):
        settings = load_settings()
        assert settings.environment == "development"
        assert settings.jwt_secret == DEV_JWT_SECRET
        assert settings.missing_required() == ["TASKSAVER_JWT_SECRET"]
        assert settings.store_backend == "firestore"
        assert settings.data_mode == "local"
        assert settings.fallback_policy == "cache"
        assert settings.allowed_origins == DEFAULT_ORIGINS
        assert settings.request_timeout is None
        assert settings.token_ttl_seconds == 7 * 24 * 60 * 60
        assert settings.is_production is False

    def test_production_requires_secret(self, monkeypatch):
        monkeypatch.setenv("TASKSAVER_ENV", "production")
        with pytest.raises(ConfigError, match="TASKSAVER_JWT_SECRET"):
            load_settings()

    def test_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TASKSAVER_JWT_SECRET", "s3cret")
        monkeypatch.setenv("TASKSAVER_STORE_FORCE_FILE", "1")
        monkeypatch.setenv("TASKSAVER_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("TASKSAVER_ALLOWED_ORIGINS", "https://a.example, https://b.example")
        monkeypatch.setenv("TASKSAVER_REQUEST_TIMEOUT", "2.5")
        monkeypatch.setenv("TASKSAVER_DATA_MODE", "API")
        monkeypatch.setenv("TASKSAVER_API_URL", "https://tasks.example/api/")
        monkeypatch.setenv("TASKSAVER_LOG_LEVEL", "debug")

        settings = load_settings()
        assert settings.missing_required() == []
        assert settings.store_backend == "file"
        assert settings.data_dir == Path(tmp_path)
        assert settings.allowed_origins == ["https://a.example", "https://b.example"]
        assert settings.request_timeout == 2.5
        assert settings.data_mode == "api"
        assert settings.api_base_url == "https://tasks.example/api"
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize(
        "var, value",
        [
            ("TASKSAVER_STORE_BACKEND", "mongo"),
            ("TASKSAVER_DATA_MODE", "sync"),
            ("TASKSAVER_FALLBACK_POLICY", "retry"),
            ("TASKSAVER_REQUEST_TIMEOUT", "soon"),
        ],
    )
    def test_invalid_values(self, monkeypatch, var, value):
        monkeypatch.setenv(var, value)
        with pytest.raises(ConfigError):
            load_settings()
