"""
Logging Configuration
Structured logging with loguru
Source: https://github.com/Delgan/loguru

Every record carries the service name, and database credentials are
scrubbed from messages before any sink sees them.
"""

import re
import sys
from pathlib import Path

from loguru import logger

SERVICE_NAME = "mbs-fee-estimate"

# user:password@ inside a URL; the password runs to the last @ of the token
_URL_CREDENTIALS = re.compile(r"(\w[\w+.-]*://[^:/@\s]+:)\S+@(?=[^@\s]*(?:\s|$))")

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "{extra[service]} | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[service]} | {name}:{function}:{line} - {message}"


def redact_database_url(url: str) -> str:
    """
    Hide the access key in a database URL before it is logged.

    Example:
        >>> redact_database_url("postgresql+asyncpg://reader:secret@db:5432/mbs")
        'postgresql+asyncpg://reader:***@db:5432/mbs'
    """
    return _URL_CREDENTIALS.sub(r"\1***@", url)


def _scrub_credentials(record) -> None:  # type: ignore[no-untyped-def]
    record["message"] = redact_database_url(record["message"])


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    json_logs: bool = False,
) -> None:
    """
    Configure application logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path; rotated at 50 MB, kept 14 days
        json_logs: Serialize records as JSON (production)
    """
    logger.remove()
    logger.configure(extra={"service": SERVICE_NAME}, patcher=_scrub_credentials)

    if json_logs:
        logger.add(sys.stderr, format="{message}", level=level, serialize=True)
    else:
        logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            rotation="50 MB",
            retention="14 days",
            compression="zip",
            format=FILE_FORMAT,
            level=level,
            serialize=json_logs,
        )

    logger.debug(f"Logging configured: level={level}, json_logs={json_logs}, file={log_file}")


def get_logger(name: str = __name__):  # type: ignore[no-untyped-def]
    """
    Get a logger bound to a module name.

    Example:
        >>> from mbs_estimate.utils.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Fee schedule lookup started")
    """
    return logger.bind(name=name)
