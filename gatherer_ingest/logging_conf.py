"""structlog front end over stdlib handlers that write JSON lines."""

from __future__ import annotations

import logging
import logging.config
import os
from pathlib import Path
from typing import Any

import structlog

ROOT_LOGGER = "gatherer_ingest"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(threadName)s %(message)s"

# handler name -> (file name, minimum level)
LOG_FILES: dict[str, tuple[str, str]] = {
    "ingest_file": ("ingest.log", "INFO"),
    "error_file": ("error.log", "ERROR"),
}

_configured = False


def _default_log_dir() -> Path:
    env_root = os.environ.get("GATHERER_INGEST_HOME")
    if env_root:
        return Path(env_root).expanduser().resolve() / "logs"
    return Path(__file__).resolve().parents[1] / "logs"


def log_path(handler: str = "ingest_file") -> Path:
    return _default_log_dir() / LOG_FILES[handler][0]


def _logging_dict(log_dir: Path, level: str) -> dict[str, Any]:
    handlers: dict[str, dict[str, Any]] = {
        "console": {"class": "logging.StreamHandler", "level": level, "formatter": "json"},
    }
    for name, (filename, file_level) in LOG_FILES.items():
        handlers[name] = {
            "class": "logging.FileHandler",
            "level": file_level,
            "filename": str(log_dir / filename),
            "encoding": "utf-8",
            "formatter": "json",
        }
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": "pythonjsonlogger.jsonlogger.JsonFormatter", "fmt": JSON_FORMAT},
        },
        "handlers": handlers,
        "loggers": {
            ROOT_LOGGER: {"handlers": list(handlers), "level": level, "propagate": False},
        },
    }


def _configure_structlog() -> None:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            # rendering is left to the JSON formatter on each handler
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(verbose: bool = False) -> structlog.BoundLogger:
    """Install handlers on first call; later calls only adjust the level.

    Console output follows ``verbose`` (DEBUG or INFO); ``logs/ingest.log``
    always receives INFO and above, ``logs/error.log`` only errors.
    """

    global _configured
    level = "DEBUG" if verbose else "INFO"
    if not _configured:
        log_dir = _default_log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
        logging.config.dictConfig(_logging_dict(log_dir, level))
        _configure_structlog()
        _configured = True
    elif verbose:
        root = logging.getLogger(ROOT_LOGGER)
        root.setLevel(level)
        for handler in root.handlers:
            if not isinstance(handler, logging.FileHandler):
                handler.setLevel(level)
    return structlog.get_logger(ROOT_LOGGER)


def component_logger(component: str, **context: Any) -> structlog.BoundLogger:
    """Logger named ``gatherer_ingest.<component>`` with context bound up front."""

    logger = structlog.get_logger(f"{ROOT_LOGGER}.{component}")
    return logger.bind(**context) if context else logger


def tail_log(path: Path, line_count: int = 50) -> list[str]:
    if not path.exists():
        return []
    with path.open("r", encoding="utf-8", errors="ignore") as stream:
        lines = stream.readlines()
    return lines[-line_count:]


__all__ = ["LOG_FILES", "component_logger", "configure_logging", "log_path", "tail_log"]
