"""
Logging configuration for ai_chat.

The TUI owns the terminal, so loguru's default stderr sink is replaced by a
rotating file sink. Standard-library loggers (httpx, httpcore) are routed into
loguru so everything ends up in the same file.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from loguru import logger

# How much of a user message may appear in the log
CONTENT_TRUNCATE_LENGTH = int(os.environ.get("AI_CHAT_LOG_CONTENT_LENGTH", "50"))

NOISY_LOGGERS = ("httpx", "httpcore", "asyncio")


class InterceptHandler(logging.Handler):
    """Forward standard-library log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find the caller outside the logging module so loguru reports the right location
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def truncate_for_log(text: str, max_length: Optional[int] = None) -> str:
    """
    Truncate message content for logging.

    Args:
        text: Content to truncate
        max_length: Maximum length (defaults to CONTENT_TRUNCATE_LENGTH)

    Returns:
        Truncated content with ellipsis if needed
    """
    if max_length is None:
        max_length = CONTENT_TRUNCATE_LENGTH
    text = text.replace("\n", " ")
    if len(text) <= max_length:
        return text
    return f"{text[:max_length]}..."


def configure_application_logging(level: str = "INFO", log_file: Optional[Union[str, Path]] = None) -> None:
    """
    Configure logging for the application.

    This should be called once at startup, before the TUI takes over the terminal.
    """
    level = level.upper()
    logger.remove()  # Remove default stderr handler
    if log_file:
        logger.add(
            sink=str(log_file),
            level=level,
            rotation="5 MB",
            retention=3,
            enqueue=False,
            backtrace=False,
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}",
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.info(f"Logging configured: level={level}, file={log_file}")
