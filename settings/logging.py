"""Logging configuration."""

import sys

from loguru import logger

from settings import LOG_DIR, LOG_RETENTION, LOG_ROTATION

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <7}</level> | "
    "<cyan>{extra[component]}</cyan> | <level>{message}</level>"
)


def _component(record) -> bool:
    """Tag each record with its top-level package (cache, catalog, events...)."""
    record["extra"].setdefault("component", (record["name"] or "").split(".")[0] or "-")
    return True


def setup_logging(level: str = "INFO", to_file: bool = True):
    """Console sink plus an optional JSON-lines file for sweeps and syncs."""
    logger.remove()

    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True, filter=_component)

    if to_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        logger.add(
            LOG_DIR / "gamenight.jsonl",
            level="DEBUG",
            serialize=True,
            filter=_component,
            rotation=LOG_ROTATION,
            retention=LOG_RETENTION,
            compression="gz",
            enqueue=True,
        )
        logger.info("Logging to {} (rotation {}, retention {})", LOG_DIR, LOG_ROTATION, LOG_RETENTION)

    return logger
