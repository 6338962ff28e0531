"""Structlog configuration for dual output: JSON files and colored console."""

import logging
import logging.handlers
import os
from pathlib import Path

import structlog

from delivery.logging.processors import (
    add_process_info,
    add_request_context,
    add_service_context,
    console_renderer,
    mask_sensitive_values,
)

DEFAULT_LOG_FILE = "./logs/notification-engine.log"
MAX_LOG_BYTES = 50 * 1024 * 1024
LOG_BACKUP_COUNT = 20


def setup_logging(
    log_level: str | None = None,
    log_file_path: str | None = None,
) -> None:
    """Configure structlog with JSON file logs and colored console logs.

    File output is JSON with all metadata on a rotating handler. Console
    output is a single colored line per event.

    Environment Variables:
    - LOG_FILE_PATH: Path to log file (default: ./logs/notification-engine.log)
    - LOG_LEVEL: Logging level (default: INFO)
    - SERVICE_NAME: Service name for metadata (default: notification-engine)
    - ENVIRONMENT: Deployment environment (default: development)

    Args:
        log_level: Overrides LOG_LEVEL when given.
        log_file_path: Overrides LOG_FILE_PATH when given.
    """
    log_file_path = log_file_path or os.getenv("LOG_FILE_PATH", DEFAULT_LOG_FILE)
    log_level = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, log_level, logging.INFO)

    Path(log_file_path).parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.handlers.RotatingFileHandler(
        filename=log_file_path,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    # Shared by structlog events and records from stdlib loggers
    pre_chain = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_request_context,
        mask_sensitive_values,
    ]

    structlog.configure(
        processors=[
            *pre_chain,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            add_service_context,
            add_process_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    file_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=[*pre_chain, add_service_context, add_process_info],
        )
    )
    console_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=console_renderer,
            foreign_pre_chain=pre_chain,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)
    root_logger.setLevel(level)

    structlog.get_logger(__name__).info(
        "Logging configured",
        log_file=log_file_path,
        log_level=log_level,
    )
