from __future__ import annotations

from fastapi import Response

from app.core.config import Settings


def set_demo_cookie(response: Response, cfg: Settings) -> None:
    """Add the demo cookie; the first visit arrives without it."""
    response.set_cookie(key=cfg.DEMO_COOKIE_NAME, value=cfg.DEMO_COOKIE_VALUE)
