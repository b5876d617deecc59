"""Logging setup: loguru sinks plus a bridge for stdlib ``logging`` records."""

import logging
import sys
from pathlib import Path

from loguru import logger

from src.pricebook.runtime.config.config_data import ConfigData
from src.pricebook.runtime.context import get_config

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "[<cyan>{extra[request_id]}</cyan>] "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

# Third-party loggers and the level they are held at
_QUIET_LOGGERS = {
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
    "uvicorn": logging.INFO,
    "uvicorn.error": logging.INFO,
    "uvicorn.access": logging.CRITICAL,
}


class InterceptHandler(logging.Handler):
    """Forward stdlib logging records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # Access lines are written by the request middleware
        if record.name == "uvicorn.access":
            return

        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(depth=2, exception=record.exc_info).bind(
            logger_name=record.name
        ).log(level, record.getMessage())


def _add_file_sink(path: Path, config: ConfigData, diagnose: bool) -> None:
    settings = config.logging
    as_json = settings.format == "json"
    path.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        str(path),
        level=settings.level,
        format="{message}" if as_json else CONSOLE_FORMAT,
        serialize=as_json,
        rotation=f"{settings.max_size_mb} MB",
        retention=settings.backup_count,
        compression="zip",
        enqueue=True,
        backtrace=diagnose,
        diagnose=diagnose,
    )


def configure_logging(config: ConfigData | None = None) -> None:
    """Send all application and library logs through loguru.

    Always logs to stderr; ``logging.file`` adds a rotating file sink.
    Variable values in tracebacks are shown outside production only.
    """
    config = config or get_config()
    diagnose = config.app.environment != "production"

    logger.remove()
    logger.configure(extra={"request_id": "-"})
    logger.add(
        sys.stderr,
        level=config.logging.level,
        format=CONSOLE_FORMAT,
        colorize=True,
        backtrace=diagnose,
        diagnose=diagnose,
    )
    if config.logging.file:
        _add_file_sink(Path(config.logging.file), config, diagnose)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in list(logging.root.manager.loggerDict):
        existing = logging.getLogger(name)
        existing.handlers = []
        existing.propagate = True
    for name, level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)

    logger.debug(
        "Logging configured at {} ({} file sink: {})",
        config.logging.level,
        config.logging.format,
        config.logging.file or "none",
    )
