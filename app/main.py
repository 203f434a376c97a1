from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import Settings, get_settings
from app.core.services.monitor import FailoverMonitor, FailoverState, ResourcePair
from app.core.templates import STATIC_DIR
from app.modules.api.router import router as api_router
from app.modules.diagnostics.router import NOT_FOUND_TEXT, router as diagnostics_router
from app.modules.ui.router import router as ui_router

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


def create_app(cfg: Optional[Settings] = None) -> FastAPI:
    """Build the app with its own failover flag and monitor."""
    cfg = cfg or get_settings()
    configure_logging(cfg.LOG_LEVEL)

    app = FastAPI(title=cfg.APP_NAME)

    primary = ResourcePair(image_url=cfg.PRIMARY_IMAGE_URL, style_url=cfg.PRIMARY_STYLE_URL)
    fallback = ResourcePair(image_url=cfg.FALLBACK_IMAGE_URL, style_url=cfg.FALLBACK_STYLE_URL)
    failover = FailoverState()

    app.state.settings = cfg
    app.state.primary = primary
    app.state.fallback = fallback
    app.state.failover = failover
    app.state.monitor = FailoverMonitor(
        primary.as_resources(),
        failover,
        interval_seconds=cfg.PROBE_INTERVAL_SECONDS,
        timeout_seconds=cfg.PROBE_TIMEOUT_SECONDS,
    )

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    app.include_router(ui_router)
    app.include_router(diagnostics_router)
    app.include_router(api_router, prefix="/api")

    @app.exception_handler(StarletteHTTPException)
    async def not_found_as_text(request: Request, exc: StarletteHTTPException):
        """Every 404, matched route or not, answers with the plain-text body."""
        if exc.status_code == 404:
            return PlainTextResponse(NOT_FOUND_TEXT, status_code=404)
        return await http_exception_handler(request, exc)

    @app.on_event("startup")
    async def startup():
        """Log configuration and start the availability monitor."""
        logger.info(f"{cfg.APP_NAME} starting ({cfg.APP_ENV})")
        logger.info(f"Primary resources: {primary.image_url} , {primary.style_url}")
        logger.info(f"Fallback resources: {fallback.image_url} , {fallback.style_url}")
        logger.info(f"Probe interval: {cfg.PROBE_INTERVAL_SECONDS}s, timeout: {cfg.PROBE_TIMEOUT_SECONDS}s")

        if cfg.MONITOR_ENABLED:
            app.state.monitor.start()
        else:
            logger.info("Availability monitor disabled (MONITOR_ENABLED=false)")

    @app.on_event("shutdown")
    async def shutdown():
        await app.state.monitor.stop()

    @app.get("/healthz")
    def healthz(request: Request):
        """Health check endpoint."""
        return {
            "ok": True,
            "app": cfg.APP_NAME,
            "env": cfg.APP_ENV,
            "port": cfg.APP_PORT,
            "mode": request.app.state.failover.mode,
        }

    return app


app = create_app()
