"""
API Router - JSON endpoints under `/api`.

- Failover monitor status (mode, last probe round, per-resource outcome)
"""

from __future__ import annotations

from fastapi import APIRouter, Request

from app.modules.api.models import FailoverStatusOut

router = APIRouter()


@router.get("/failover/status", response_model=FailoverStatusOut)
def failover_status(request: Request):
    """Return the current failover mode and the last completed probe round."""
    return request.app.state.monitor.snapshot()
