"""Run the demo server: ``python -m app``."""

from __future__ import annotations

import logging

import uvicorn

from app.core.config import ConfigurationError, get_settings

logger = logging.getLogger("app")


def main() -> int:
    try:
        cfg = get_settings()
    except ConfigurationError as exc:
        logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        logger.error("Invalid configuration: %s", exc)
        return 1

    # Imported after validation so a bad environment is reported once, above.
    from app.main import app

    logger.info("Listening on port %s ... ", cfg.APP_PORT)
    uvicorn.run(app, host=cfg.APP_HOST, port=cfg.APP_PORT, log_level=cfg.LOG_LEVEL.lower())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
