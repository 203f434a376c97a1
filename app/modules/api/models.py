from __future__ import annotations
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

class ItemOut(BaseModel):
    what: str = "item"
    name: str


class ProbeResultOut(BaseModel):
    name: str
    url: str
    reachable: bool
    observed_at: str
    status_code: Optional[int] = None
    error: Optional[str] = None
    latency_ms: Optional[float] = None


class ProbeRoundOut(BaseModel):
    started_at: str
    finished_at: str
    duration_ms: float
    failover: bool
    results: List[ProbeResultOut] = Field(default_factory=list)


class FailoverStatusOut(BaseModel):
    mode: str
    failover: bool
    running: bool
    interval_seconds: float
    timeout_seconds: float
    rounds_completed: int
    transitions: int
    resources: List[Dict[str, Any]] = Field(default_factory=list)
    last_round: Optional[ProbeRoundOut] = None
