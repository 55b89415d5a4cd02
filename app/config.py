# app/config.py
"""
Centralized configuration management with startup validation.

Reads environment variables once into an AppConfig. Invalid values fall
back to defaults and are reported as warnings; secret values are never
logged.
"""
import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from auth.password import DEFAULT_BCRYPT_ROUNDS, MAX_BCRYPT_ROUNDS, MIN_BCRYPT_ROUNDS

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

SERVICE_NAME = "token-auth-api"
SERVICE_VERSION = "0.1.0"

DEFAULT_DB_PATH = "data/auth.db"
DEFAULT_MAX_REQUEST_SIZE_BYTES = 1_048_576  # 1MB
MIN_REQUEST_SIZE_BYTES = 1024  # 1KB minimum

# Sensitive substrings that should never appear in logs
SENSITIVE_SUBSTRINGS = ("key", "token", "secret", "password", "credential", "hash")


# =============================================================================
# Configuration Dataclass
# =============================================================================


@dataclass
class AppConfig:
    """Application configuration loaded from environment."""

    service_name: str = SERVICE_NAME
    service_version: str = SERVICE_VERSION
    environment: str = "development"

    db_path: str = DEFAULT_DB_PATH
    bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    max_request_size_bytes: int = DEFAULT_MAX_REQUEST_SIZE_BYTES

    # Warnings collected during config load
    warnings: list = field(default_factory=list)


# =============================================================================
# Configuration Loading
# =============================================================================


def _parse_int_env(
    name: str,
    default: int,
    min_value: Optional[int] = None,
    max_value: Optional[int] = None,
) -> tuple[int, Optional[str]]:
    """
    Parse an integer environment variable with validation.

    Returns (value, warning_message).
    On invalid input, returns default with a warning.
    """
    raw = os.environ.get(name)
    if raw is None:
        return default, None

    try:
        value = int(raw)
    except ValueError:
        return default, f"{name}='{raw}' is not a valid integer; using default {default}"

    if min_value is not None and value < min_value:
        return default, f"{name}={value} is below minimum {min_value}; using default {default}"

    if max_value is not None and value > max_value:
        return default, f"{name}={value} is above maximum {max_value}; using default {default}"

    return value, None


def _parse_list_env(name: str, default: List[str]) -> List[str]:
    """Parse a comma-separated environment variable."""
    raw = os.environ.get(name, "")
    items = [item.strip() for item in raw.split(",") if item.strip()]
    return items or list(default)


def load_config() -> AppConfig:
    """
    Load and validate application configuration from environment.

    Returns:
        AppConfig instance with validated configuration.
    """
    warnings = []

    environment = os.environ.get("AUTH_ENVIRONMENT", "development")
    db_path = os.environ.get("AUTH_DB_PATH") or DEFAULT_DB_PATH

    bcrypt_rounds, rounds_warning = _parse_int_env(
        "AUTH_BCRYPT_ROUNDS",
        DEFAULT_BCRYPT_ROUNDS,
        min_value=MIN_BCRYPT_ROUNDS,
        max_value=MAX_BCRYPT_ROUNDS,
    )
    if rounds_warning:
        warnings.append(rounds_warning)

    max_request_size, size_warning = _parse_int_env(
        "MAX_REQUEST_SIZE_BYTES",
        DEFAULT_MAX_REQUEST_SIZE_BYTES,
        min_value=MIN_REQUEST_SIZE_BYTES,
    )
    if size_warning:
        warnings.append(size_warning)

    cors_origins = _parse_list_env("AUTH_CORS_ORIGINS", ["*"])

    for warning in warnings:
        logger.warning(f"[CONFIG] {warning}")

    return AppConfig(
        environment=environment,
        db_path=db_path,
        bcrypt_rounds=bcrypt_rounds,
        cors_origins=cors_origins,
        max_request_size_bytes=max_request_size,
        warnings=warnings,
    )


def log_config_snapshot(config: AppConfig) -> str:
    """
    Generate and log a safe configuration snapshot.

    Returns the snapshot string for testing purposes.
    """
    snapshot = (
        f"[STARTUP] service={config.service_name} "
        f"version={config.service_version} "
        f"environment={config.environment} "
        f"db_path={config.db_path} "
        f"bcrypt_rounds={config.bcrypt_rounds} "
        f"cors_origins={','.join(config.cors_origins)} "
        f"max_request_size_bytes={config.max_request_size_bytes}"
    )
    logger.info(snapshot)
    return snapshot


def validate_config_snapshot_safety(snapshot: str) -> bool:
    """
    Validate that a config snapshot doesn't contain sensitive values.

    Returns True if safe, False if a sensitive key is given a value.
    """
    for part in snapshot.lower().split():
        if "=" not in part:
            continue
        key, _, _ = part.partition("=")
        if any(sensitive in key for sensitive in SENSITIVE_SUBSTRINGS):
            return False
    return True
