"""Availability monitor package.

Probes the primary page resources in the background and flips the shared
failover flag that the request layer reads on every render.
"""

from app.core.services.monitor.errors import (
    MonitorError,
    ResourceNetworkError,
    ResourceProbeError,
    ResourceStatusError,
    ResourceTimeout,
)
from app.core.services.monitor.failover_state import FailoverState
from app.core.services.monitor.monitor import FailoverMonitor, Prober, failover_required
from app.core.services.monitor.prober import ResourceProber
from app.core.services.monitor.types import (
    ProbeResult,
    ProbeRound,
    RenderContext,
    Resource,
    ResourcePair,
    ResourceSet,
)

__all__ = [
    "FailoverMonitor",
    "FailoverState",
    "Prober",
    "ResourceProber",
    "failover_required",
    "Resource",
    "ResourcePair",
    "ResourceSet",
    "ProbeResult",
    "ProbeRound",
    "RenderContext",
    "MonitorError",
    "ResourceProbeError",
    "ResourceNetworkError",
    "ResourceTimeout",
    "ResourceStatusError",
]
