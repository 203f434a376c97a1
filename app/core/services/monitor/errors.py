"""
Availability monitor - Custom Exceptions

Only error definitions, no logic.
Raised inside prober.py and translated there into ProbeResult.error, so
none of them ever reaches the monitor loop or an HTTP client.
"""
from __future__ import annotations

from typing import Optional


class MonitorError(Exception):
    """Base error for the availability monitor."""
    pass


class ResourceProbeError(MonitorError):
    """A resource could not be confirmed reachable."""

    kind = "error"

    def __init__(self, message: str, *, url: str = "", status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ResourceNetworkError(ResourceProbeError):
    """Connection refused, DNS failure, TLS error or a dropped connection."""

    kind = "network"


class ResourceTimeout(ResourceProbeError):
    """Fetch did not finish before the probe deadline."""

    kind = "timeout"


class ResourceStatusError(ResourceProbeError):
    """Server answered with a status other than 200."""

    kind = "status"
