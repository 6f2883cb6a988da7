"""Root logger setup for the API server and the CLI."""

import logging
import sys
from logging.handlers import RotatingFileHandler

from enorett.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FORMAT_DETAILED = (
    "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
)

# Third-party loggers that log every request or statement at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine")


def setup_logging(level: str | None = None, stream=None) -> None:
    """Configure application logging based on settings.

    Console logging is always on; file logging follows ``log_file_enabled``
    and rotates at ``log_file_max_bytes``.

    Args:
        level: Overrides ``settings.log_level`` for the root logger
        stream: Console stream, stdout by default. The CLI passes stderr so
            log lines stay out of command output.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level or settings.log_level))

    # Runs again from the CLI callback; start from a bare root
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(console_handler)

    if settings.log_file_enabled:
        log_path = settings.resolved_log_file_path
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            filename=log_path,
            maxBytes=settings.log_file_max_bytes,
            backupCount=settings.log_file_backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT_DETAILED))
        root_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
