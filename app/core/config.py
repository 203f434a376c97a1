from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from urllib.parse import urlparse

from dotenv import load_dotenv

load_dotenv()  # Load .env file if present


class ConfigurationError(ValueError):
    """Raised when startup settings are missing or malformed."""


def _get(key: str, default: str = "") -> str:
    return os.getenv(key, default)


def _get_bool(key: str, default: bool = False) -> bool:
    raw = _get(key, "1" if default else "0").strip().lower()
    return raw in {"1", "true", "yes", "on"}


def _get_int(key: str, default: int) -> int:
    raw = _get(key, str(default)).strip()
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}") from None


def _get_float(key: str, default: float) -> float:
    raw = _get(key, str(default)).strip()
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be a number, got {raw!r}") from None


def _env(key: str, default: str = ""):
    return field(default_factory=lambda: _get(key, default))


@dataclass(frozen=True)
class Settings:
    APP_NAME: str = _env("APP_NAME", "Resource Failover Demo")
    APP_ENV: str = _env("APP_ENV", "dev")
    APP_HOST: str = _env("APP_HOST", "0.0.0.0")
    APP_PORT: int = field(default_factory=lambda: _get_int("APP_PORT", 8097))
    LOG_LEVEL: str = field(default_factory=lambda: _get("LOG_LEVEL", "INFO").upper())

    # Resources rendered on the home page
    PRIMARY_IMAGE_URL: str = _env("PRIMARY_IMAGE_URL", "https://picsum.photos/id/1015/640/360")
    PRIMARY_STYLE_URL: str = _env(
        "PRIMARY_STYLE_URL", "https://cdn.jsdelivr.net/npm/water.css@2/out/water.css"
    )
    FALLBACK_IMAGE_URL: str = _env("FALLBACK_IMAGE_URL", "/static/img/fallback.svg")
    FALLBACK_STYLE_URL: str = _env("FALLBACK_STYLE_URL", "/static/css/fallback.css")

    # Availability monitor
    MONITOR_ENABLED: bool = field(default_factory=lambda: _get_bool("MONITOR_ENABLED", True))
    PROBE_INTERVAL_SECONDS: float = field(
        default_factory=lambda: _get_float("PROBE_INTERVAL_SECONDS", 10.0)
    )
    PROBE_TIMEOUT_SECONDS: float = field(
        default_factory=lambda: _get_float("PROBE_TIMEOUT_SECONDS", 5.0)
    )

    # Demo cookie set by every page
    DEMO_COOKIE_NAME: str = _env("DEMO_COOKIE_NAME", "testcookiename")
    DEMO_COOKIE_VALUE: str = _env("DEMO_COOKIE_VALUE", "testcookievalue")


def _is_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def validate_settings(cfg: Settings) -> Settings:
    """Check the settings the server cannot start without.

    Primary resources are probed, so they must be absolute http(s) URLs.
    Fallback resources are only rendered and may also be site paths such as
    ``/static/css/fallback.css``.
    """
    problems = []

    for key in ("PRIMARY_IMAGE_URL", "PRIMARY_STYLE_URL"):
        value = (getattr(cfg, key) or "").strip()
        if not value:
            problems.append(f"{key} is required")
        elif not _is_http_url(value):
            problems.append(f"{key} must be an absolute http(s) URL, got {value!r}")

    for key in ("FALLBACK_IMAGE_URL", "FALLBACK_STYLE_URL"):
        value = (getattr(cfg, key) or "").strip()
        if not value:
            problems.append(f"{key} is required")
        elif not (_is_http_url(value) or value.startswith("/")):
            problems.append(f"{key} must be an http(s) URL or an absolute path, got {value!r}")

    if cfg.PROBE_INTERVAL_SECONDS <= 0:
        problems.append("PROBE_INTERVAL_SECONDS must be greater than 0")
    if cfg.PROBE_TIMEOUT_SECONDS <= 0:
        problems.append("PROBE_TIMEOUT_SECONDS must be greater than 0")
    if cfg.LOG_LEVEL not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
        problems.append(f"LOG_LEVEL not recognised: {cfg.LOG_LEVEL}")
    if not 0 < cfg.APP_PORT < 65536:
        problems.append(f"APP_PORT out of range: {cfg.APP_PORT}")

    if problems:
        raise ConfigurationError("; ".join(problems))
    return cfg


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load and validate settings once per process.

    Raises ConfigurationError; the entry point turns it into a non-zero exit.
    """
    return validate_settings(Settings())
