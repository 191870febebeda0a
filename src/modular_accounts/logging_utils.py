"""
Logging helpers for smart account operations.

Modules log through ``logging.getLogger(__name__)``; this module only
configures handlers and masks addresses when the configuration asks for it.
"""
from __future__ import annotations

import logging
from typing import Optional

from .config import LoggingConfig, get_config


def mask_address(address: str, config: Optional[LoggingConfig] = None) -> str:
    """Mask middle portion of address for privacy."""
    config = config or get_config().logging
    if not config.mask_addresses or len(address) < 10:
        return address
    return f"{address[:6]}...{address[-4:]}"


def setup_logging(
    level: Optional[str] = None,
    format_string: Optional[str] = None,
    json_format: Optional[bool] = None,
) -> None:
    """
    Set up logging configuration.

    Args:
        level: Log level (default: from config)
        format_string: Custom format string
        json_format: Use JSON formatting (default: from config)
    """
    config = get_config().logging
    level = (level or config.level).upper()
    if json_format is None:
        json_format = config.json_format

    if format_string is None:
        if json_format:
            format_string = '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "name": "%(name)s", "message": "%(message)s"}'
        else:
            format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=getattr(logging, level),
        format=format_string,
    )

    logging.getLogger("modular_accounts").setLevel(getattr(logging, level))
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
