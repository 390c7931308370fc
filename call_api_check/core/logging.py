"""
Centralized Logging Configuration.

All modules must use this logging setup. Do not create standalone loggers.
Configuration is loaded from logging.yaml in the settings directory.

Console records are written to stderr. Standard output carries nothing but
the plugin result, since the monitoring agent parses it.

Structured fields in every JSON log record:
    timestamp   - ISO 8601 UTC timestamp
    level       - Log level (debug, info, warning, error, critical)
    logger      - Module path (e.g., call_api_check.cli.client)
    event       - Log message
    func_name   - Function that emitted the log
    lineno      - Line number in source file
    source      - Origin context, set explicitly (cli, client, internal)

Usage:
    from call_api_check.core.logging import get_logger, setup_logging

    # Setup at application start (loads from logging.yaml)
    setup_logging()

    # Override config values if needed
    setup_logging(level="DEBUG", format_type="console")

    # Get logger in modules
    logger = get_logger(__name__)
    logger.info("Message", key="value")

    # Explicit source
    log_with_source(logger, "client", "debug", "Daemon request", path="/v1/checker")
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import Processor

from call_api_check.core.config import get_app_config, get_config_dir
from call_api_check.core.config_schema import LoggingSchema

VALID_SOURCES = frozenset({
    "cli",
    "client",
    "internal",
})
"""
Recognized log source values. log_with_source rejects anything else.
Source is always set explicitly by the caller. Never guessed from logger names.
"""


def _get_logging_config() -> LoggingSchema:
    """
    Get the validated logging.yaml settings.

    Raises:
        ConfigurationError: If logging.yaml is missing or invalid
    """
    return get_app_config().logging


def _resolve_log_path(configured_path: str) -> Path:
    """
    Resolve the log file path.

    Args:
        configured_path: Path from logging.yaml (relative to the settings directory)

    Returns:
        Absolute Path to the log file
    """
    path = Path(configured_path).expanduser()
    if path.is_absolute():
        return path
    return get_config_dir() / path


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structured logging for the application.

    Settings come from the validated logging.yaml (AppConfig.logging).
    Parameters passed to this function override the YAML configuration.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Overrides config.
        format_type: Output format ('json' or 'console'). Overrides config.
        enable_console: Whether to enable stderr output. Overrides config.
        enable_file_logging: Whether to write to JSONL file. Overrides config.
    """
    config = _get_logging_config()
    file_config = config.handlers.file

    effective_level = level or config.level
    effective_format = format_type or config.format
    effective_console_enabled = (
        config.handlers.console.enabled if enable_console is None else enable_console
    )
    effective_file_enabled = (
        file_config.enabled if enable_file_logging is None else enable_file_logging
    )

    log_level = getattr(logging, effective_level.upper())

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]

    json_formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        foreign_pre_chain=shared_processors,
    )

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if effective_format == "console":
        console_formatter = structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=False),
            foreign_pre_chain=shared_processors,
        )
    else:
        console_formatter = json_formatter

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if effective_console_enabled:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

    if effective_file_enabled:
        log_path = _resolve_log_path(file_config.path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            filename=str(log_path),
            maxBytes=file_config.max_bytes,
            backupCount=file_config.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(json_formatter)
        root_logger.addHandler(file_handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """
    Get a logger instance for the given name.

    Args:
        name: Logger name, typically __name__

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log a message with an explicit source.

    Args:
        logger: The logger instance
        source: Log source (cli, client, internal)
        level: Log level (debug, info, warning, error, critical)
        message: Log message
        **kwargs: Additional context fields

    Raises:
        ValueError: If source is not one of VALID_SOURCES
        AttributeError: If level is not a valid log level

    Example:
        log_with_source(logger, "client", "debug", "Daemon response", status_code=200)
    """
    if source not in VALID_SOURCES:
        raise ValueError(f"Unknown log source: {source}")
    log_method = getattr(logger, level.lower())
    log_method(message, source=source, **kwargs)
