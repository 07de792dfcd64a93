"""
xmlcompose

Load XML files with literal text replacements, query them with XPath, compose
nodes across documents and render them back to indented XML text.
"""

__version__ = "1.0.0"

import logging
from typing import Any, Iterable, List, Optional, Union

from lxml import etree

# Import core exceptions
from .core.exceptions import (
    XmlComposeError, ConfigError, ValidationError, FileOperationError, ParseError,
    XPathError, NodeNotFoundError, FormatError, CompositionError, SerializationError
)

# Import core modules
from .core.xml.loader import Source, parse, parse_string
from .core.xml.normalizer import clean
from .core.xml.query import Ancestor, XmlQuery, query_all, query_single, query_string, query_int
from .core.xml.composer import append, append_from_file
from .core.xml.serializer import render, save
from .core.replacements import ReplacementMap, apply_replacements, load_replacements
from .core.settings import Settings

from .constants import DEFAULT_ENCODING

# Set up logging
logger = logging.getLogger("xmlcompose")

class XmlHelper:
    """
    Object-oriented wrapper around the document pipeline.

    Every method delegates to the functional core; encoding, indentation,
    CDATA element names and parser limits default to the helper's settings.
    A helper holds no parser state and creates a new parser for every call.
    """

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize the helper.

        Args:
            settings: Settings to use (optional, loaded from the standard
                locations and the environment if not provided)
        """
        self.settings = settings if settings is not None else Settings()

    # Loading
    def parse_file(
        self,
        source: Source,
        replacements: Optional[ReplacementMap] = None,
        encoding: Optional[str] = None
    ) -> etree._ElementTree:
        """Parse a file, bytes or stream with optional literal replacements"""
        return parse(
            source,
            replacements,
            encoding=encoding or self.settings.encoding,
            huge_tree=self.settings.huge_tree
        )

    def parse_string(
        self,
        text: str,
        replacements: Optional[ReplacementMap] = None
    ) -> etree._ElementTree:
        """Parse XML text with optional literal replacements"""
        return parse_string(text, replacements, huge_tree=self.settings.huge_tree)

    @staticmethod
    def clean(node: Union[etree._Element, etree._ElementTree]):
        """Remove formatting whitespace from a document or subtree"""
        return clean(node)

    # XPath queries
    def query_all(self, ancestor: Ancestor, xpath: str) -> List[Any]:
        """Find all nodes matching an XPath expression"""
        return query_all(ancestor, xpath)

    def query_single(self, ancestor: Ancestor, xpath: str) -> Optional[Any]:
        """Find the first node matching an XPath expression, or None"""
        return query_single(ancestor, xpath)

    def query_string(self, ancestor: Ancestor, xpath: str) -> str:
        """Get the text value of the node matching an XPath expression"""
        return query_string(ancestor, xpath)

    def query_int(self, ancestor: Ancestor, xpath: str) -> int:
        """Get the integer value of the node matching an XPath expression"""
        return query_int(ancestor, xpath)

    # Composition
    def append_node(
        self,
        parent: etree._Element,
        child: Union[etree._Element, etree._ElementTree]
    ) -> etree._Element:
        """Append a copy of a node, or of a document's root element, to a parent"""
        return append(parent, child)

    def append_file(
        self,
        parent: etree._Element,
        path: str,
        replacements: Optional[ReplacementMap] = None,
        encoding: Optional[str] = None
    ) -> etree._Element:
        """Parse a file and append its root element to a parent"""
        return append_from_file(
            parent,
            path,
            replacements,
            encoding=encoding or self.settings.encoding,
            huge_tree=self.settings.huge_tree
        )

    # Output
    def _cdata(self, cdata_elements: Optional[Iterable[str]]) -> Iterable[str]:
        return self.settings.cdata_elements if cdata_elements is None else cdata_elements

    def render(
        self,
        document: Union[etree._Element, etree._ElementTree],
        cdata_elements: Optional[Iterable[str]] = None,
        encoding: Optional[str] = None
    ) -> str:
        """Render a document as indented XML text with a declaration line"""
        return render(
            document,
            self._cdata(cdata_elements),
            encoding=encoding or self.settings.encoding,
            indent=self.settings.indent
        )

    def save(
        self,
        document: Union[etree._Element, etree._ElementTree],
        path: str,
        cdata_elements: Optional[Iterable[str]] = None,
        encoding: Optional[str] = None
    ) -> str:
        """Render a document and write it to a file in the declared encoding"""
        return save(
            document,
            path,
            self._cdata(cdata_elements),
            encoding=encoding or self.settings.encoding,
            indent=self.settings.indent
        )

# Function to configure logging
def configure_logging(
    level: str = "info",
    log_file: Optional[str] = None,
    quiet: bool = False,
    verbose: bool = False,
    json_format: bool = False
) -> None:
    """Configure the logging system"""
    from .core.logging_utils import configure_logging as configure_logging_impl
    configure_logging_impl(level, log_file, quiet, verbose, json_format)

__all__ = [
    # Helper class
    'XmlHelper', 'XmlQuery', 'Settings',

    # Functional API
    'parse', 'parse_string', 'clean',
    'query_all', 'query_single', 'query_string', 'query_int',
    'append', 'append_from_file', 'render', 'save',
    'apply_replacements', 'load_replacements',

    # Logging
    'configure_logging',

    # Constants
    'DEFAULT_ENCODING',

    # Exceptions
    'XmlComposeError', 'ConfigError', 'ValidationError', 'FileOperationError', 'ParseError',
    'XPathError', 'NodeNotFoundError', 'FormatError', 'CompositionError', 'SerializationError',
]
