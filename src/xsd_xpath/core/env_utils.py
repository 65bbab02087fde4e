#!/usr/bin/env python3
"""
Helpers for reading environment variables.

Values are cleaned of surrounding whitespace and Windows CRLF line endings,
which creep in when .env files are edited on different operating systems.
"""

import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)


def getenv_clean(key: str, default: str = None, strip: bool = True) -> Optional[str]:
    """Get an environment variable with line endings and whitespace removed.

    Args:
        key: Environment variable name
        default: Default value if variable is not set
        strip: If False, return the raw value

    Returns:
        Cleaned environment variable value, or default if not set

    Example:
        >>> # .env file has: DEV_TOKEN=secret\r\n
        >>> getenv_clean("DEV_TOKEN")
        'secret'
    """
    raw_value = os.getenv(key, default)

    if raw_value is None:
        return None

    if not strip:
        return raw_value

    cleaned = raw_value.strip().rstrip("\r\n")

    if raw_value != cleaned:
        logger.warning(
            f"Environment variable {key} had trailing whitespace/line endings: "
            f"raw={repr(raw_value)}, cleaned={repr(cleaned)}"
        )

    return cleaned


def getenv_bool(key: str, default: bool = False) -> bool:
    """Get an environment variable as a boolean.

    "true", "1", "yes" and "on" are True; "false", "0", "no", "off" and the
    empty string are False (case-insensitive). Anything else falls back to
    the default with a warning.
    """
    raw_value = getenv_clean(key, None)

    if raw_value is None:
        return default

    cleaned_lower = raw_value.lower()
    if cleaned_lower in ("true", "1", "yes", "on"):
        return True
    elif cleaned_lower in ("false", "0", "no", "off", ""):
        return False

    logger.warning(
        f"Environment variable {key} has unexpected boolean value: {repr(raw_value)}. "
        f"Using default: {default}"
    )
    return default


def getenv_int(key: str, default: int) -> int:
    """Get an environment variable as an integer, or the default if unset or invalid."""
    raw_value = getenv_clean(key, None)

    if raw_value is None:
        return default

    try:
        return int(raw_value)
    except ValueError:
        logger.warning(
            f"Environment variable {key} is not a valid integer: {repr(raw_value)}. "
            f"Using default: {default}"
        )
        return default


def getenv_list(key: str, default: list[str] = None, separator: str = ",") -> list[str]:
    """Get an environment variable as a list of cleaned, non-empty items.

    Example:
        >>> # .env file has: XPATH_EXPORT_SKIP_NODES=Signature, Extension\r\n
        >>> getenv_list("XPATH_EXPORT_SKIP_NODES")
        ['Signature', 'Extension']
    """
    if default is None:
        default = []

    raw_value = getenv_clean(key, None)

    if not raw_value:
        return default

    items = [item.strip() for item in raw_value.split(separator) if item.strip()]
    return items if items else default
