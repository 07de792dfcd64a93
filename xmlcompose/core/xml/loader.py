"""
Document loader for xmlcompose.

This module reads XML sources, applies literal replacements to their text and
parses the result with a permissive, non-validating profile:

- no DTD loading, no validation and no network access
- entities are not resolved
- comments are dropped
- CDATA sections are merged into ordinary text
- undeclared namespace prefixes are accepted and kept as part of the name
- elements in a default namespace carry their local names

Prefixed names and all namespace declarations are left as written, so a
rendered document keeps them. Every parsed document is normalized before it
is returned. A parser is built for each call; lxml parsers must not be
shared between threads.
"""

import logging
import os
from typing import Optional, Union, BinaryIO

from lxml import etree

from ...constants import DEFAULT_ENCODING, ERROR_MESSAGES
from ..exceptions import FileOperationError, ParseError
from ..logging_utils import log
from ..replacements import ReplacementMap, apply_replacements
from .normalizer import clean

logger = logging.getLogger("xmlcompose")

Source = Union[str, bytes, bytearray, os.PathLike, BinaryIO]


def make_parser(huge_tree: bool = False) -> etree.XMLParser:
    """
    Create a parser configured with the permissive profile.

    Text handed to the parser is always UTF-8 encoded by the loader, so the
    parser encoding overrides any declaration inside the document.

    The parser runs in recovery mode so that namespace errors, such as an
    undeclared prefix, do not abort parsing. ``parse_string`` checks the
    parser's error log afterwards and rejects every other error.

    Args:
        huge_tree: Disable libxml2's safety limits on tree depth and text size

    Returns:
        A new XMLParser instance
    """
    return etree.XMLParser(
        encoding="utf-8",
        load_dtd=False,
        dtd_validation=False,
        attribute_defaults=False,
        no_network=True,
        resolve_entities=False,
        remove_comments=True,
        strip_cdata=True,
        recover=True,
        huge_tree=huge_tree,
    )


def _fatal_errors(parser: etree.XMLParser) -> list:
    """Return the logged parse errors that make a document unusable."""
    return [
        entry for entry in parser.error_log
        if entry.level >= etree.ErrorLevels.ERROR and entry.domain != etree.ErrorDomains.NAMESPACE
    ]


def _describe(source: Source) -> str:
    if isinstance(source, (bytes, bytearray)):
        return "<bytes>"
    if hasattr(source, "read"):
        return getattr(source, "name", "<stream>")
    return os.fspath(source)


def read_source(source: Source, encoding: str = DEFAULT_ENCODING) -> str:
    """
    Read a source completely and decode it.

    Args:
        source: File path, raw bytes or a readable binary stream
        encoding: Codec used to decode the content

    Returns:
        The decoded text without a leading byte-order mark

    Raises:
        FileOperationError: If the source cannot be read or decoded
    """
    name = _describe(source)

    if isinstance(source, (bytes, bytearray)):
        raw = bytes(source)
    elif hasattr(source, "read"):
        raw = source.read()
    else:
        path = os.fspath(source)
        logger.info(f"Loading XML file: {path}")
        try:
            with open(path, "rb") as f:
                raw = f.read()
        except FileNotFoundError as e:
            error_msg = ERROR_MESSAGES["file_not_found"].format(source=path)
            logger.debug(error_msg)
            raise FileOperationError(error_msg) from e
        except OSError as e:
            error_msg = ERROR_MESSAGES["read_failed"].format(source=path, error=e)
            logger.debug(error_msg)
            raise FileOperationError(error_msg) from e

    if isinstance(raw, str):
        text = raw
    else:
        try:
            text = raw.decode(encoding)
        except LookupError as e:
            error_msg = ERROR_MESSAGES["unknown_encoding"].format(encoding=encoding)
            logger.debug(error_msg)
            raise FileOperationError(error_msg) from e
        except UnicodeDecodeError as e:
            error_msg = ERROR_MESSAGES["decode_failed"].format(source=name, encoding=encoding, error=e)
            logger.debug(error_msg)
            raise FileOperationError(error_msg) from e

    return text[1:] if text.startswith("\ufeff") else text


def strip_default_namespace(root: etree._Element) -> etree._Element:
    """
    Move elements written without a prefix out of their default namespace.

    An unprefixed element in a document declaring ``xmlns="..."`` is matched
    by its plain tag name afterwards. Prefixed elements, attributes and the
    namespace declarations themselves are not touched, so rendering writes
    the declarations back as they were.

    Args:
        root: Root of the subtree to rewrite

    Returns:
        The same root element
    """
    for element in root.iter(tag=etree.Element):
        if element.prefix is None and element.tag.startswith("{"):
            element.tag = etree.QName(element).localname
    return root


def parse_string(
    text: str,
    replacements: Optional[ReplacementMap] = None,
    huge_tree: bool = False,
    source_name: str = "<string>",
) -> etree._ElementTree:
    """
    Parse already decoded XML text.

    Args:
        text: XML document text
        replacements: Optional ordered literal replacements applied before parsing
        huge_tree: Disable libxml2's safety limits
        source_name: Name used in log and error messages

    Returns:
        The normalized document

    Raises:
        ValidationError: If a replacement key is invalid
        ParseError: If the text is not well-formed XML
    """
    text = apply_replacements(text, replacements)

    logger.debug(f"Parsing XML from {source_name}")
    parser = make_parser(huge_tree)
    try:
        root = etree.fromstring(text.encode("utf-8"), parser)
    except etree.XMLSyntaxError as e:
        error_msg = ERROR_MESSAGES["parse_failed"].format(source=source_name, error=e)
        logger.debug(error_msg)
        raise ParseError(error_msg) from e

    errors = _fatal_errors(parser)
    if errors or root is None:
        if errors:
            first = errors[0]
            detail = f"{first.message.strip()}, line {first.line}, column {first.column}"
        else:
            detail = "document has no root element"
        error_msg = ERROR_MESSAGES["parse_failed"].format(source=source_name, error=detail)
        logger.debug(error_msg)
        raise ParseError(error_msg)

    for entry in parser.error_log:
        if entry.domain == etree.ErrorDomains.NAMESPACE:
            logger.debug(f"Namespace issue in {source_name} accepted: {entry.message.strip()}")

    strip_default_namespace(root)
    tree = etree.ElementTree(root)
    clean(tree)
    return tree


def parse(
    source: Source,
    replacements: Optional[ReplacementMap] = None,
    encoding: str = DEFAULT_ENCODING,
    huge_tree: bool = False,
) -> etree._ElementTree:
    """
    Read, substitute, parse and normalize an XML source.

    Args:
        source: File path, raw bytes or a readable binary stream
        replacements: Optional ordered literal replacements applied to the
            decoded text before parsing
        encoding: Codec used to decode the source
        huge_tree: Disable libxml2's safety limits

    Returns:
        The normalized document

    Raises:
        FileOperationError: If the source cannot be read or decoded
        ValidationError: If a replacement key is invalid
        ParseError: If the content is not well-formed XML
    """
    text = read_source(source, encoding)
    tree = parse_string(text, replacements, huge_tree=huge_tree, source_name=_describe(source))
    log("Loaded XML document", "debug", {"source": _describe(source), "root": tree.getroot().tag})
    return tree
