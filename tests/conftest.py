"""Shared test fixtures for the failover demo tests."""
import sys
from pathlib import Path

import pytest

# Ensure the project root is in sys.path so that `app.*` imports work
# when running pytest from the repo root.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.config import Settings  # noqa: E402


@pytest.fixture
def make_settings():
    """Build Settings with test URLs and the background monitor off."""

    def _make(**overrides) -> Settings:
        values = {
            "APP_NAME": "Failover Test",
            "APP_ENV": "test",
            "MONITOR_ENABLED": False,
            "PRIMARY_IMAGE_URL": "http://primary.test/banner.png",
            "PRIMARY_STYLE_URL": "http://primary.test/site.css",
            "FALLBACK_IMAGE_URL": "/static/img/fallback.svg",
            "FALLBACK_STYLE_URL": "/static/css/fallback.css",
            "PROBE_INTERVAL_SECONDS": 10.0,
            "PROBE_TIMEOUT_SECONDS": 5.0,
        }
        values.update(overrides)
        return Settings(**values)

    return _make
