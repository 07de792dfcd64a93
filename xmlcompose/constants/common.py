"""
Common constants for xmlcompose.

This module defines constants used throughout xmlcompose, including
default encodings, output formatting, settings locations and error messages.
"""

from typing import Dict, List

# Encoding used to decode input and label output when none is given
DEFAULT_ENCODING = "UTF-8"

# Spaces per indentation level in rendered output
INDENT_AMOUNT = 4

# Declaration prepended to every rendered document
XML_DECLARATION = '<?xml version="1.0" encoding="{encoding}"?>\n'

# Characters XML treats as whitespace (a non-breaking space is content)
XML_WHITESPACE = " \t\r\n"

# CDATA sections cannot contain their own terminator
CDATA_TERMINATOR = "]]>"

# Namespace bound to the xml: prefix in every document
XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

# Settings
ENV_PREFIX = "XMLCOMPOSE_"

SETTINGS_PATHS: List[str] = [
    "./.xmlcompose.json",
    "~/.xmlcompose/settings.json",
]

DEFAULT_SETTINGS = {
    "encoding": DEFAULT_ENCODING,
    "indent": INDENT_AMOUNT,
    "cdata_elements": [],
    "huge_tree": False,
}

# File extensions accepted for replacement maps
REPLACEMENT_FILE_TYPES: Dict[str, str] = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
}

# Query modes supported by the CLI
QUERY_MODES = ["all", "single", "string", "int"]

# Error messages
ERROR_MESSAGES = {
    "file_not_found": "XML file not found: {source}",
    "read_failed": "Unable to read {source}: {error}",
    "unknown_encoding": "Unknown encoding '{encoding}'",
    "decode_failed": "Unable to decode {source} as {encoding}: {error}",
    "parse_failed": "XML parsing failed for {source}: {error}",
    "xpath_invalid": "Error evaluating XPath '{xpath}': {error}",
    "xpath_not_nodeset": "XPath '{xpath}' does not select a node set (got {kind})",
    "node_not_found": "No node matches XPath '{xpath}'",
    "not_an_integer": "Value '{value}' at XPath '{xpath}' is not a base-10 integer",
    "render_failed": "Error rendering XML document: {error}",
}
