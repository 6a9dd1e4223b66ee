"""Logging configuration for shoplist using loguru."""
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from shoplist.config.settings import ShopListSettings, get_settings

DETAILED_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level> | "
    "<level>{extra}</level>"
)
SIMPLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<level>{message}</level>"
)

# Records logged through the bare logger still need extra[name]
logger.configure(extra={"name": "shoplist"})

_handler_ids: List[int] = []


def setup_logging(settings: Optional[ShopListSettings] = None) -> None:
    """Install the console and rotating file sinks.

    Calling it again replaces the sinks installed by the previous call, so
    an application can reconfigure logging after loading new settings.

    Args:
        settings: Settings to read levels, format and file from
            (default: get_settings())
    """
    settings = settings or get_settings()

    if not _handler_ids:
        # Drop loguru's default stderr handler on first setup
        logger.remove()
    while _handler_ids:
        logger.remove(_handler_ids.pop())

    log_format = DETAILED_FORMAT if settings.LOG_FORMAT == "detailed" else SIMPLE_FORMAT

    log_file = Path(settings.LOG_FILE) if settings.LOG_FILE else Path("logs") / "shoplist.log"
    log_file.parent.mkdir(parents=True, exist_ok=True)

    # Console handler with color
    _handler_ids.append(logger.add(
        sys.stderr,
        format=log_format,
        level=settings.LOG_LEVEL,
        colorize=True,
        backtrace=True,
        diagnose=True,
    ))

    # File handler with rotation
    _handler_ids.append(logger.add(
        log_file,
        format=log_format,
        level=settings.LOG_LEVEL,
        rotation=f"{settings.LOG_ROTATION_SIZE_MB} MB",
        retention=f"{settings.LOG_RETENTION_DAYS} days",
        compression="zip",
        serialize=True,
        backtrace=True,
        diagnose=True,
        enqueue=True,  # Thread-safe logging
    ))
    logger.bind(name="shoplist.logging").debug("Logging configured", log_file=str(log_file))


def get_logger(name: str):
    """Get a logger instance with the given name.

    Args:
        name: The name of the module/component requesting the logger.
            Should be the module's __name__ attribute.

    Returns:
        A logger instance bound with the given name.
    """
    if not name.startswith("shoplist.") and name != "__main__":
        name = f"shoplist.{name}"
    return logger.bind(name=name)
