"""Logging configuration for the University Inventory Portal.

Console output always; rotating files under ``LOG_DIR`` when it is writable.
The backend client logs at ``BACKEND_LOG_LEVEL`` and also into
``backend.log``.
"""
import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any, Optional

from app.core.config import settings

BACKEND_LOGGER = "app.core.backend"

DETAILED_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
SIMPLE_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def level_from(name: Optional[str], default: int) -> int:
    """Resolve a level name such as ``"debug"``; unknown or empty names give ``default``."""
    if not name:
        return default
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else default


def _setting(config: Any, name: str, default: Any) -> Any:
    return getattr(config, name, default) if config is not None else default


def _rotating(path: Path, level: int, config: Any) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        filename=path,
        maxBytes=_setting(config, "LOG_MAX_BYTES", 10 * 1024 * 1024),
        backupCount=_setting(config, "LOG_BACKUP_COUNT", 5),
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=DETAILED_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(config: Any = None) -> None:
    """
    Setup application-wide logging configuration.

    Args:
        config: Settings to read ``LOG_LEVEL``, ``LOG_DIR`` and
            ``BACKEND_LOG_LEVEL`` from. Defaults to the loaded settings; with
            none loaded, logs INFO to the console and ``logs/``.
    """
    config = config if config is not None else settings
    debug = bool(_setting(config, "DEBUG", False))
    level = level_from(_setting(config, "LOG_LEVEL", None), logging.DEBUG if debug else logging.INFO)
    backend_level = level_from(_setting(config, "BACKEND_LOG_LEVEL", None), level)

    log_dir = _setting(config, "LOG_DIR", "logs")
    log_path = Path(log_dir) if log_dir else None
    if log_path:
        try:
            log_path.mkdir(parents=True, exist_ok=True)
        except (PermissionError, OSError):
            log_path = None

    root_logger = logging.getLogger()
    root_logger.setLevel(min(level, backend_level))

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(fmt=SIMPLE_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(console_handler)

    backend_logger = logging.getLogger(BACKEND_LOGGER)
    backend_logger.setLevel(backend_level)
    for handler in backend_logger.handlers[:]:
        backend_logger.removeHandler(handler)
        handler.close()

    if log_path:
        try:
            root_logger.addHandler(_rotating(log_path / "portal.log", level, config))
            root_logger.addHandler(_rotating(log_path / "errors.log", logging.ERROR, config))
            backend_logger.addHandler(_rotating(log_path / "backend.log", backend_level, config))
        except (PermissionError, OSError):
            root_logger.warning("File logging not available, using console logging only")

    # Suppress noisy third-party loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    root_logger.info(
        f"Logging initialized at {logging.getLevelName(level)} level "
        f"(backend client at {logging.getLevelName(backend_level)}, "
        f"files: {log_path if log_path else 'disabled'})"
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
