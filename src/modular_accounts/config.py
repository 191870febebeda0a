"""
Configuration management for modular-accounts.

Provides centralized configuration for:
- Default ERC-4337 entry point revision
- JSON-RPC timeout values
- Logging configuration
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Optional

logger = logging.getLogger(__name__)

SUPPORTED_ENTRYPOINT_VERSIONS = ("0.7", "0.8")


@dataclass
class LoggingConfig:
    """Configuration for account operation logging."""
    level: str = "INFO"

    # Sensitive data handling
    mask_addresses: bool = False  # Partial masking for privacy

    json_format: bool = False


@dataclass
class AccountsConfig:
    """
    Master configuration for modular-accounts.

    Supports loading from environment variables with prefix MODULAR_ACCOUNTS_.
    """
    entry_point_version: str = "0.8"
    rpc_timeout_seconds: float = 30.0
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self) -> None:
        if self.entry_point_version not in SUPPORTED_ENTRYPOINT_VERSIONS:
            raise ValueError(
                f"Unsupported entry point version: {self.entry_point_version}. "
                f"Valid options: {', '.join(SUPPORTED_ENTRYPOINT_VERSIONS)}"
            )


def _get_env(key: str, default: Any = None, prefix: str = "MODULAR_ACCOUNTS_") -> Any:
    """Get environment variable with prefix."""
    return os.getenv(f"{prefix}{key}", default)


def _get_env_bool(key: str, default: bool = False) -> bool:
    value = _get_env(key)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def build_default_config() -> AccountsConfig:
    """Build configuration from environment variables and defaults."""
    return AccountsConfig(
        entry_point_version=_get_env("ENTRYPOINT_VERSION", "0.8"),
        rpc_timeout_seconds=float(_get_env("RPC_TIMEOUT", "30")),
        logging=LoggingConfig(
            level=_get_env("LOG_LEVEL", "INFO"),
            mask_addresses=_get_env_bool("MASK_ADDRESSES"),
            json_format=_get_env_bool("LOG_JSON"),
        ),
    )


# Global configuration instance
_global_config: Optional[AccountsConfig] = None


def get_config() -> AccountsConfig:
    """Get the global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = build_default_config()
    return _global_config


def set_config(config: Optional[AccountsConfig]) -> None:
    """Set (or reset, with None) the global configuration instance."""
    global _global_config
    _global_config = config
