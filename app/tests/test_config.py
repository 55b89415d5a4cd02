# app/tests/test_config.py
"""Tests for configuration management and startup validation."""
import os
from unittest.mock import patch

from app.config import (
    DEFAULT_DB_PATH,
    DEFAULT_MAX_REQUEST_SIZE_BYTES,
    AppConfig,
    load_config,
    log_config_snapshot,
    validate_config_snapshot_safety,
)
from auth.password import DEFAULT_BCRYPT_ROUNDS


class TestLoadConfig:
    """Tests for load_config function."""

    def test_default_values(self):
        """Config loads with sensible defaults when no env vars set."""
        with patch.dict(os.environ, {}, clear=True):
            config = load_config()

        assert config.service_name == "token-auth-api"
        assert config.environment == "development"
        assert config.db_path == DEFAULT_DB_PATH
        assert config.bcrypt_rounds == DEFAULT_BCRYPT_ROUNDS
        assert config.cors_origins == ["*"]
        assert config.max_request_size_bytes == DEFAULT_MAX_REQUEST_SIZE_BYTES
        assert config.warnings == []

    def test_values_from_environment(self):
        env = {
            "AUTH_ENVIRONMENT": "production",
            "AUTH_DB_PATH": "/var/lib/auth/auth.db",
            "AUTH_BCRYPT_ROUNDS": "10",
            "AUTH_CORS_ORIGINS": "https://a.example, https://b.example",
            "MAX_REQUEST_SIZE_BYTES": "4096",
        }
        with patch.dict(os.environ, env, clear=True):
            config = load_config()

        assert config.environment == "production"
        assert config.db_path == "/var/lib/auth/auth.db"
        assert config.bcrypt_rounds == 10
        assert config.cors_origins == ["https://a.example", "https://b.example"]
        assert config.max_request_size_bytes == 4096

    def test_invalid_integer_falls_back(self):
        with patch.dict(os.environ, {"AUTH_BCRYPT_ROUNDS": "lots"}, clear=True):
            config = load_config()

        assert config.bcrypt_rounds == DEFAULT_BCRYPT_ROUNDS
        assert any("AUTH_BCRYPT_ROUNDS" in w for w in config.warnings)

    def test_rounds_out_of_range_fall_back(self):
        with patch.dict(os.environ, {"AUTH_BCRYPT_ROUNDS": "2"}, clear=True):
            low = load_config()
        with patch.dict(os.environ, {"AUTH_BCRYPT_ROUNDS": "40"}, clear=True):
            high = load_config()

        assert low.bcrypt_rounds == DEFAULT_BCRYPT_ROUNDS
        assert high.bcrypt_rounds == DEFAULT_BCRYPT_ROUNDS
        assert "below minimum" in low.warnings[0]
        assert "above maximum" in high.warnings[0]

    def test_request_size_below_minimum_falls_back(self):
        with patch.dict(os.environ, {"MAX_REQUEST_SIZE_BYTES": "10"}, clear=True):
            config = load_config()

        assert config.max_request_size_bytes == DEFAULT_MAX_REQUEST_SIZE_BYTES
        assert len(config.warnings) == 1


class TestConfigSnapshot:
    """Tests for the startup snapshot."""

    def test_snapshot_contains_settings(self):
        snapshot = log_config_snapshot(AppConfig(db_path="x.db", bcrypt_rounds=4))

        assert "service=token-auth-api" in snapshot
        assert "db_path=x.db" in snapshot
        assert "bcrypt_rounds=4" in snapshot

    def test_snapshot_is_safe(self):
        snapshot = log_config_snapshot(AppConfig())
        assert validate_config_snapshot_safety(snapshot) is True

    def test_unsafe_snapshot_detected(self):
        assert validate_config_snapshot_safety("service=x api_token=abc") is False
        assert validate_config_snapshot_safety("password=hunter2") is False
