"""
Exception classes for xmlcompose.

This module defines custom exceptions used throughout the xmlcompose library.
"""

class XmlComposeError(Exception):
    """
    Base exception class for all xmlcompose errors.

    All custom exceptions in the library should inherit from this class.
    """
    pass

class ConfigError(XmlComposeError):
    """Exception raised when settings cannot be loaded or are invalid."""
    pass

class ValidationError(XmlComposeError):
    """Exception raised when caller-supplied input is rejected."""
    pass

class FileOperationError(XmlComposeError):
    """Exception raised when a source cannot be read, decoded or written."""
    pass

class ParseError(XmlComposeError):
    """Exception raised when parsing XML fails."""
    pass

class XPathError(XmlComposeError):
    """Exception raised when an XPath expression is invalid or cannot be evaluated."""
    pass

class NodeNotFoundError(XmlComposeError):
    """Exception raised when a query expected a node but matched nothing."""

    def __init__(self, message, xpath=None):
        """
        Initialize a NodeNotFoundError.

        Args:
            message: Error message
            xpath: The expression that matched nothing (optional)
        """
        super().__init__(message)
        self.xpath = xpath

class FormatError(XmlComposeError):
    """Exception raised when a node value cannot be converted to the requested type."""

    def __init__(self, message, value=None):
        """
        Initialize a FormatError.

        Args:
            message: Error message
            value: The offending raw value (optional)
        """
        super().__init__(message)
        self.value = value

class CompositionError(XmlComposeError):
    """Exception raised when a node cannot be imported into a document."""
    pass

class SerializationError(XmlComposeError):
    """Exception raised when a document cannot be rendered or written."""
    pass
