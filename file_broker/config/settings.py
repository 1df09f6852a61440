"""
Application Settings

Environment-driven configuration for the API, the lifecycle service and
request authentication.
"""

import logging
import os
import re
from datetime import timedelta
from typing import List, Optional

logger = logging.getLogger(__name__)

DEFAULT_UPLOAD_MAX_SIZE = 100 * 1024 * 1024  # 100 MiB
DEFAULT_UPLOAD_TTL = timedelta(minutes=5)
DEFAULT_DOWNLOAD_TTL = timedelta(minutes=15)

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h)")
_UNIT_SECONDS = {"ms": 0.001, "s": 1, "m": 60, "h": 3600}


def parse_duration(value: str) -> timedelta:
    """
    Parse a duration string.

    Accepts plain seconds ("300") or unit sequences ("90s", "5m", "1h30m").

    Args:
        value: Duration string

    Returns:
        Parsed timedelta

    Raises:
        ValueError: If the string is not a valid positive duration
    """
    text = (value or "").strip().lower()
    if not text:
        raise ValueError("empty duration")

    if text.isdigit():
        seconds = float(text)
    else:
        pos = 0
        seconds = 0.0
        for match in _DURATION_PART.finditer(text):
            if match.start() != pos:
                raise ValueError(f"invalid duration: {value!r}")
            seconds += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
            pos = match.end()
        if pos != len(text):
            raise ValueError(f"invalid duration: {value!r}")

    if seconds <= 0:
        raise ValueError(f"duration must be positive: {value!r}")
    return timedelta(seconds=seconds)


def _env_duration(name: str, default: timedelta) -> timedelta:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return parse_duration(raw)
    except ValueError as e:
        logger.warning(f"Ignoring {name}={raw!r}: {e}; using {default}")
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not an integer; using {default}")
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


class AppConfig:
    """Application configuration."""

    def __init__(self):
        self.api_version = os.getenv("API_VERSION", "v1")
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        self.cors_origins = _env_list("CORS_ORIGINS", ["*"])

        # Hand storage notifications to Celery instead of confirming inline
        self.storage_events_async = _env_bool("STORAGE_EVENTS_ASYNC", False)


class FileServiceConfig:
    """Upload limits and signed URL lifetimes."""

    def __init__(self):
        self.upload_max_size = _env_int("UPLOAD_MAX_SIZE", DEFAULT_UPLOAD_MAX_SIZE)
        self.upload_ttl = _env_duration("UPLOAD_TTL", DEFAULT_UPLOAD_TTL)
        self.download_ttl = _env_duration("DOWNLOAD_TTL", DEFAULT_DOWNLOAD_TTL)


class AuthConfig:
    """Secrets used by the transport adapters."""

    def __init__(self):
        self.jwt_secret: Optional[str] = os.getenv("JWT_SECRET") or None
        self.jwt_algorithms = _env_list("JWT_ALGORITHMS", ["HS256"])
        self.internal_secret: Optional[str] = os.getenv("INTERNAL_SERVICE_SECRET") or None
        self.webhook_secret: Optional[str] = os.getenv("STORAGE_WEBHOOK_SECRET") or None
