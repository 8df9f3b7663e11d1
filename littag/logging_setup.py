"""Logging configuration: Rich console output plus a rotating log file."""

import logging
import logging.config
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

_configured = False


def _console_handler() -> RichHandler:
    """Rich handler writing to stderr; stdout carries exported data."""
    return RichHandler(
        console=Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )


def setup_logging(level: str = "INFO", log_dir: Optional[Path] = None) -> None:
    """Configure the root logger once per process.

    Args:
        level: Log level name for both handlers
        log_dir: Directory for ``littag.log``; console-only when None
    """
    global _configured
    if _configured:
        logging.getLogger().setLevel(level)
        return

    handlers: dict = {
        "console": {
            "()": _console_handler,
            "level": level,
        },
    }
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "standard",
            "level": level,
            "filename": str(log_dir / "littag.log"),
            "maxBytes": 5 * 1024 * 1024,
            "backupCount": 3,
            "encoding": "utf-8",
            "delay": True,
        }

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": handlers,
            "root": {"handlers": list(handlers), "level": level},
        }
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    _configured = True
