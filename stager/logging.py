"""Logging utilities for staging runs."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

_LOGGER_NAME = "stager"
STAGING_LOG = "staging.log"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the stager hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the stager logger with console output and optional file sink."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations in one process do not duplicate output.
    for handler in list(logger.handlers):
        if not isinstance(handler, _StagingLogHandler):
            logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[stager] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(_file_formatter())
        logger.addHandler(file_handler)

    return logger


class _StagingLogHandler(logging.FileHandler):
    """File handler that only records messages emitted by one staging thread."""

    def __init__(self, path: Path) -> None:
        super().__init__(path, encoding="utf-8")
        self._thread_id = threading.get_ident()
        self.setFormatter(_file_formatter())

    def filter(self, record: logging.LogRecord) -> bool:
        return record.thread == self._thread_id and super().filter(record)


@contextmanager
def staging_log(droplet_dir: Path) -> Iterator[Path]:
    """Copy this thread's stager log records into ``<droplet>/logs/staging.log``."""
    logs_dir = Path(droplet_dir) / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    path = logs_dir / STAGING_LOG
    handler = _StagingLogHandler(path)
    logger = logging.getLogger(_LOGGER_NAME)
    if logger.level == logging.NOTSET:
        logger.setLevel(logging.INFO)
    logger.addHandler(handler)
    try:
        yield path
    finally:
        logger.removeHandler(handler)
        handler.close()


def _file_formatter() -> logging.Formatter:
    return logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")


__all__ = ["STAGING_LOG", "configure_logging", "get_logger", "staging_log"]
