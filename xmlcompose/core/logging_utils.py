"""
Logging utilities for xmlcompose.

This module provides functions for configuring and using the logging system.
"""

import json
import logging
import os
import sys
import traceback
from typing import Optional, Dict, Any

# Define log levels
LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL
}

# Create a global logger
logger = logging.getLogger("xmlcompose")

CONSOLE_FORMAT = '%(levelname)s: %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Set by the --log-json option; handlers added later pick it up
_json_output = False


class JsonFormatter(logging.Formatter):
    """Formatter emitting one JSON object per record."""

    def format(self, record):
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if record.exc_info:
            log_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'value': str(record.exc_info[1]),
                'traceback': traceback.format_tb(record.exc_info[2])
            }

        if hasattr(record, 'extra_data'):
            log_data.update(record.extra_data)

        return json.dumps(log_data)


def configure_logging(
    level: str = "info",
    log_file: Optional[str] = None,
    quiet: bool = False,
    verbose: bool = False,
    json_format: bool = False
) -> None:
    """
    Configure the global logger

    Args:
        level: Log level (debug, info, warning, error, critical)
        log_file: Path to log file (optional)
        quiet: Suppress console output if True
        verbose: Enable verbose output if True
        json_format: Use JSON formatting for structured logging
    """
    if verbose:
        level = "debug"
    elif quiet and level == "info":  # Only override info level with quiet
        level = "warning"

    log_level = LOG_LEVELS.get(level.lower(), logging.INFO)
    logger.setLevel(log_level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    if json_format:
        console_formatter = JsonFormatter()
        file_formatter = JsonFormatter()
    else:
        console_format = CONSOLE_FORMAT
        file_format = FILE_FORMAT

        if verbose:
            console_format = file_format

        console_formatter = logging.Formatter(console_format)
        file_formatter = logging.Formatter(file_format)

    if not quiet:
        # Rendered documents go to stdout, so diagnostics go to stderr
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(console_formatter)
        console_handler.setLevel(log_level)
        logger.addHandler(console_handler)

    if log_file:
        dir_path = os.path.dirname(os.path.abspath(log_file))
        if dir_path and not os.path.exists(dir_path):
            os.makedirs(dir_path, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(log_level)
        logger.addHandler(file_handler)

    logger.debug(f"Logging configured: level={level}, log_file={log_file}, quiet={quiet}, verbose={verbose}, json_format={json_format}")

def log(
    message: str,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None
) -> None:
    """
    Log a message with optional structured data

    The data is appended as ``key=value`` pairs for plain formatters and
    attached as ``extra_data`` for the JSON formatter.

    Args:
        message: Log message
        level: Log level (debug, info, warning, error, critical)
        data: Optional structured data to include
    """
    log_level = LOG_LEVELS.get(level.lower(), logging.INFO)

    if data:
        data_str = " ".join(f"{k}={v}" for k, v in data.items())
        message = f"{message} - {data_str}"

    logger.log(log_level, message, extra={'extra_data': data or {}})

# Option callbacks for use with Typer CLI
def verbose_callback(value: bool) -> bool:
    """Typer callback for verbose flag"""
    if value:
        log_level = "debug"
        current_handlers = logger.handlers
        if not current_handlers:
            configure_logging(level=log_level, quiet=False)
        else:
            logger.setLevel(LOG_LEVELS[log_level])
            for handler in current_handlers:
                if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
                    handler.setLevel(LOG_LEVELS[log_level])
    return value

def quiet_callback(value: bool) -> bool:
    """Typer callback for quiet flag"""
    if value:
        for handler in logger.handlers[:]:
            if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
                logger.removeHandler(handler)
    return value

def log_level_callback(value: str) -> str:
    """Typer callback to validate and set log level"""
    value = value.lower()
    if value not in LOG_LEVELS:
        valid_levels = ", ".join(LOG_LEVELS.keys())
        raise ValueError(f"Log level must be one of: {valid_levels}")

    current_handlers = logger.handlers
    if current_handlers:
        logger.setLevel(LOG_LEVELS[value])
        for handler in current_handlers:
            if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
                handler.setLevel(LOG_LEVELS[value])

    return value

def log_file_callback(value: Optional[str]) -> Optional[str]:
    """Typer callback for log file"""
    if value:
        try:
            dir_path = os.path.dirname(os.path.abspath(value))
            if dir_path:
                os.makedirs(dir_path, exist_ok=True)

            formatter = JsonFormatter() if _json_output else logging.Formatter(FILE_FORMAT)

            for handler in logger.handlers[:]:
                if isinstance(handler, logging.FileHandler):
                    logger.removeHandler(handler)

            file_handler = logging.FileHandler(value)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
        except OSError as e:
            raise ValueError(f"Cannot write to log file: {str(e)}")

    return value

def log_json_callback(value: bool) -> bool:
    """Typer callback for JSON log output"""
    global _json_output
    if value or _json_output:
        for handler in logger.handlers:
            if value:
                handler.setFormatter(JsonFormatter())
            elif isinstance(handler, logging.FileHandler):
                handler.setFormatter(logging.Formatter(FILE_FORMAT))
            else:
                handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    _json_output = value
    return value
