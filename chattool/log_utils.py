import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
STDOUT_ENV = "CHATTOOL_LOG_STDOUT"


def _writes_to(logger: logging.Logger, path: Path) -> bool:
    target = os.path.abspath(path)
    return any(isinstance(h, RotatingFileHandler) and h.baseFilename == target for h in logger.handlers)


def setup_logger(path: Path, name: str = "chattool", max_bytes: int = 2_000_000, backups: int = 3) -> logging.Logger:
    """Route the ``name`` logger (and the module loggers below it) to a rotating file.

    A second call for the same file reuses the handler already attached.
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    if _writes_to(logger, path):
        return logger
    path.parent.mkdir(parents=True, exist_ok=True)
    handlers = [RotatingFileHandler(path, encoding="utf-8", maxBytes=max_bytes, backupCount=backups)]
    if os.environ.get(STDOUT_ENV) == "1":
        handlers.append(logging.StreamHandler())
    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def close_logger(logger: Optional[logging.Logger]) -> None:
    """Flush and detach every handler so the log file is released at shutdown."""
    if logger is None:
        return
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
