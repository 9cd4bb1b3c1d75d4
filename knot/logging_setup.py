"""File logging for KNOT. The terminal belongs to the TUI, so nothing goes to stdout."""

from __future__ import annotations

import logging
import os
import sys
import uuid
from logging.handlers import RotatingFileHandler
from pathlib import Path

APP_NAME = "knot"
SESSION_ID = uuid.uuid4().hex[:8]

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s | sid=%(session)s"


def log_dir() -> Path:
    return Path(os.environ.get("KNOT_LOG_DIR", str(Path.home() / f".{APP_NAME}" / "logs"))).expanduser()


class EnsureSessionFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "session"):
            record.session = SESSION_ID
        return True


def setup_logging(level: str = "INFO", directory: Path | None = None) -> logging.Logger:
    """Attach a rotating file handler to the ``knot`` logger (idempotent)."""
    logger = logging.getLogger(APP_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False

    if logger.handlers:
        return logger

    directory = directory or log_dir()
    path = directory / f"{APP_NAME}.log"
    try:
        directory.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(path, maxBytes=2 * 1024 * 1024, backupCount=5, encoding="utf-8")
    except OSError as e:
        # Logging is optional; the session runs without a log file.
        print(f"{APP_NAME}: logging disabled, cannot write {path}: {e}", file=sys.stderr)
        logger.addHandler(logging.NullHandler())
        return logger

    fh.setFormatter(logging.Formatter(LOG_FORMAT))
    fh.addFilter(EnsureSessionFilter())
    logger.addHandler(fh)

    logger.info("Logging initialized. log_file=%s", path)
    return logger


def install_excepthook() -> None:
    log = logging.getLogger(APP_NAME)

    def _excepthook(exc_type, exc, tb):
        log.critical("Uncaught exception", exc_info=(exc_type, exc, tb))
        sys.__excepthook__(exc_type, exc, tb)

    sys.excepthook = _excepthook
