"""
FireGuard Structured Logging Configuration

structlog carries key-value context (coordinates, grid sizes, model metrics)
through every module; loguru owns the sinks: colored console and a rotating
file in development, JSON lines plus an error file in production.
"""
import sys
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import structlog
from loguru import logger

# Repository checkout; logs/ is created beside the package by default.
PROJECT_ROOT = Path(__file__).parent.parent.parent
DEFAULT_LOG_DIR = PROJECT_ROOT / "logs"

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message} | {extra}"
CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level> | "
    "<magenta>extras: {extra}</magenta>"
)

# Log fields holding degrees; ~11 m precision is plenty for grid cells.
COORDINATE_FIELDS = ("latitude", "longitude", "lat", "lon")
COORDINATE_PRECISION = 4

# Per-request chatter from dependencies drowns the risk logs.
QUIET_LOGGERS = {
    "aiohttp.access": logging.WARNING,
    "uvicorn.access": logging.WARNING,
    "lightgbm": logging.WARNING,
}


def round_coordinates(_logger: Any, _method: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """structlog processor: trim float coordinates so grid logs stay readable."""
    for key in COORDINATE_FIELDS:
        value = event_dict.get(key)
        if isinstance(value, float):
            event_dict[key] = round(value, COORDINATE_PRECISION)
    return event_dict


def setup_logging(
    environment: str = "development",
    log_dir: Optional[Union[str, Path]] = None,
) -> None:
    """
    Configure structured logging for the FireGuard service.

    Args:
        environment: "development" or "production"
        log_dir: Directory for log files (default: <repo>/logs)
    """
    log_path = Path(log_dir) if log_dir else DEFAULT_LOG_DIR
    log_path.mkdir(parents=True, exist_ok=True)

    logger.remove()

    if environment == "development":
        logger.add(
            sys.stderr,
            format=CONSOLE_FORMAT,
            level="DEBUG",
            colorize=True,
            backtrace=True,
            diagnose=True,
        )
        logger.add(
            log_path / "fireguard_dev.log",
            format=FILE_FORMAT,
            level="INFO",
            rotation="10 MB",
            retention="30 days",
            compression="gz",
        )
    else:
        logger.add(
            sys.stdout,
            format=FILE_FORMAT,
            level="INFO",
            serialize=True,
        )
        # Model build failures and upstream outages end up here.
        logger.add(
            log_path / "fireguard_errors.log",
            format=FILE_FORMAT,
            level="ERROR",
            rotation="50 MB",
            retention="90 days",
            compression="gz",
        )

    # structlog renders through the stdlib root logger; without a level here
    # filter_by_level would drop everything below WARNING.
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if environment == "development" else logging.INFO,
    )
    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            round_coordinates,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if environment == "production" else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger.info(
        "Logging system initialized",
        environment=environment,
        log_dir=str(log_path),
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Structured logger for a module; pass ``__name__``."""
    return structlog.get_logger(name)
