"""
Availability monitor - Data types

Value objects passed between the prober, the monitor loop and the request
layer. All of them are immutable; the only mutable piece of the monitor is
FailoverState.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class Resource:
    """A remote URL whose reachability decides the failover mode."""
    name: str
    url: str


ResourceSet = Tuple[Resource, ...]


@dataclass(frozen=True)
class ResourcePair:
    """Image + stylesheet URLs rendered together on the home page."""
    image_url: str
    style_url: str

    def as_resources(self) -> ResourceSet:
        return (
            Resource(name="image", url=self.image_url),
            Resource(name="style", url=self.style_url),
        )


@dataclass(frozen=True)
class ProbeResult:
    resource: Resource
    reachable: bool
    observed_at: dt.datetime
    status_code: Optional[int] = None
    error: Optional[str] = None
    latency_ms: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.resource.name,
            "url": self.resource.url,
            "reachable": self.reachable,
            "observed_at": self.observed_at.isoformat(),
            "status_code": self.status_code,
            "error": self.error,
            "latency_ms": self.latency_ms,
        }


@dataclass(frozen=True)
class ProbeRound:
    """Outcome of one complete pass over the monitored resources."""
    results: Tuple[ProbeResult, ...]
    started_at: dt.datetime
    finished_at: dt.datetime
    failover: bool

    @property
    def duration_ms(self) -> float:
        return round((self.finished_at - self.started_at).total_seconds() * 1000, 1)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat(),
            "duration_ms": self.duration_ms,
            "failover": self.failover,
            "results": [r.to_dict() for r in self.results],
        }


@dataclass(frozen=True)
class RenderContext:
    """Resource URLs for one home page render."""
    image_url: str
    style_url: str
    failover: bool

    @classmethod
    def select(cls, failover: bool, primary: ResourcePair, fallback: ResourcePair) -> "RenderContext":
        pair = fallback if failover else primary
        return cls(image_url=pair.image_url, style_url=pair.style_url, failover=failover)
