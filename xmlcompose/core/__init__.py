"""
Core package for xmlcompose.

This package provides the core functionality of xmlcompose:
- xmlcompose.core.xml: The document pipeline (load, normalize, query, compose, render)
- xmlcompose.core.replacements: Literal text replacement and replacement map files
- xmlcompose.core.settings: Default values from files and the environment
- xmlcompose.core.exceptions: The exception hierarchy
- xmlcompose.core.logging_utils: Logger configuration and CLI callbacks
"""

# Import the xml package
from . import xml

from .xml import (
    # Classes
    XmlQuery,

    # Loading
    parse, parse_string, read_source, make_parser, strip_default_namespace,

    # Normalization
    clean, is_blank,

    # XPath operations
    query_all, query_single, query_string, query_int, node_text,

    # Composition
    import_node, append, append_from_file,

    # Serialization
    render, save,
)

from .exceptions import (
    XmlComposeError, ConfigError, ValidationError, FileOperationError, ParseError,
    XPathError, NodeNotFoundError, FormatError, CompositionError, SerializationError
)

from .replacements import (
    apply_replacements, load_replacements
)

from .settings import Settings

# Define the public API
__all__ = [
    # XML package
    'xml',

    # Classes
    'XmlQuery', 'Settings',

    # Loading
    'parse', 'parse_string', 'read_source', 'make_parser', 'strip_default_namespace',

    # Normalization
    'clean', 'is_blank',

    # XPath operations
    'query_all', 'query_single', 'query_string', 'query_int', 'node_text',

    # Composition
    'import_node', 'append', 'append_from_file',

    # Serialization
    'render', 'save',

    # Replacements
    'apply_replacements', 'load_replacements',

    # Exceptions
    'XmlComposeError', 'ConfigError', 'ValidationError', 'FileOperationError', 'ParseError',
    'XPathError', 'NodeNotFoundError', 'FormatError', 'CompositionError', 'SerializationError',
]
