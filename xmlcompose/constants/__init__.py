"""
Constants package for xmlcompose.

This package exports constants used throughout xmlcompose, including
encoding defaults, output formatting and error messages.
"""

from .common import (
    # Encoding and output formatting
    DEFAULT_ENCODING,
    INDENT_AMOUNT,
    XML_DECLARATION,
    XML_WHITESPACE,
    CDATA_TERMINATOR,
    XML_NAMESPACE,
    # Settings
    ENV_PREFIX,
    SETTINGS_PATHS,
    DEFAULT_SETTINGS,
    # Replacement map files
    REPLACEMENT_FILE_TYPES,
    # CLI
    QUERY_MODES,
    # Error messages
    ERROR_MESSAGES,
)

__all__ = [
    "DEFAULT_ENCODING",
    "INDENT_AMOUNT",
    "XML_DECLARATION",
    "XML_WHITESPACE",
    "CDATA_TERMINATOR",
    "XML_NAMESPACE",
    "ENV_PREFIX",
    "SETTINGS_PATHS",
    "DEFAULT_SETTINGS",
    "REPLACEMENT_FILE_TYPES",
    "QUERY_MODES",
    "ERROR_MESSAGES",
]
