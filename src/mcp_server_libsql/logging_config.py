"""Loguru logging configuration for the server.

Call ``setup_logging()`` once at startup to:
- replace loguru's default stderr sink with a JSON-lines file sink
- intercept all stdlib ``logging`` records (mcp, anyio) and route them
  through loguru.

Nothing is ever written to stdout: the stdio transport owns it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from loguru import logger


class InterceptHandler(logging.Handler):
    """Redirect stdlib logging records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore[assignment]
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(*, log_file: Path, level: str = "WARNING") -> None:
    """Configure loguru as the single logging backend.

    Args:
        log_file: File that receives one JSON object per record.
        level: Minimum log level (DEBUG, INFO, WARNING, …).
    """
    logger.remove()
    logger.add(log_file, level=level, serialize=True)

    intercept = InterceptHandler()
    for name in ("mcp", "anyio"):
        stdlib_logger = logging.getLogger(name)
        stdlib_logger.handlers = [intercept]
        stdlib_logger.propagate = False

    logging.root.handlers = [intercept]
    logging.root.setLevel(level)
