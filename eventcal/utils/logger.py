import logging
import sys
from typing import Any, TextIO

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _level(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)


def setup_logger(name: str, level: str = "INFO", stream: TextIO | None = None) -> logging.Logger:
    """Return the named calendar logger with a single console handler attached.

    Calling it again (every ``create_app`` does) only updates the level.
    """
    logger = logging.getLogger(name)
    logger.setLevel(_level(level))

    if not logger.handlers:
        handler = logging.StreamHandler(stream or sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    for handler in logger.handlers:
        handler.setLevel(_level(level))

    return logger


def log_with_context(logger: logging.Logger, level: str, message: str, **context: Any) -> None:
    """Log ``message`` followed by ``key=value`` pairs; ``None`` values are dropped."""
    pairs = [f"{key}={value}" for key, value in context.items() if value is not None]
    full_message = f"{message} {' '.join(pairs)}" if pairs else message
    logger.log(_level(level), full_message)
