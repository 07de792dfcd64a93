"""
Cross-document node composition for xmlcompose.

Nodes are imported by deep copy: the copy becomes part of the target document
and the source document is left unchanged.
"""

import copy
import logging
import os
from typing import Optional, Union

from lxml import etree

from ...constants import DEFAULT_ENCODING
from ..exceptions import CompositionError
from ..replacements import ReplacementMap
from .loader import parse

logger = logging.getLogger("xmlcompose")


def import_node(node: Union[etree._Element, etree._ElementTree]) -> etree._Element:
    """
    Create a detached deep copy of a node, ready to be appended elsewhere.

    A document is replaced by its root element. The text following the node
    in its original parent (its tail) is not part of the node and is dropped.

    Args:
        node: Element, comment, processing instruction or ElementTree

    Returns:
        The copied node

    Raises:
        CompositionError: If ``node`` is not an lxml node or document
    """
    if isinstance(node, etree._ElementTree):
        node = node.getroot()
    if not isinstance(node, etree._Element):
        raise CompositionError(f"Cannot import {type(node).__name__}; only nodes and documents can be appended")

    imported = copy.deepcopy(node)
    imported.tail = None
    return imported


def append(
    parent: etree._Element,
    child: Union[etree._Element, etree._ElementTree],
) -> etree._Element:
    """
    Append a copy of a node (or of a document's root element) to a parent.

    Args:
        parent: Element receiving the new last child
        child: Node or document to import

    Returns:
        The appended copy

    Raises:
        CompositionError: If ``parent`` is not an element or ``child`` is not a node
    """
    if isinstance(parent, etree._ElementTree):
        raise CompositionError("A document already has a root element; append to an element of it instead")
    if not isinstance(parent, etree._Element) or not isinstance(parent.tag, str):
        raise CompositionError(f"Cannot append children to {type(parent).__name__}")

    imported = import_node(child)
    parent.append(imported)
    logger.debug(f"Appended <{imported.tag}> to <{parent.tag}>")
    return imported


def append_from_file(
    parent: etree._Element,
    path: Union[str, os.PathLike],
    replacements: Optional[ReplacementMap] = None,
    encoding: str = DEFAULT_ENCODING,
    huge_tree: bool = False,
) -> etree._Element:
    """
    Parse a file and append its root element to a parent.

    Args:
        parent: Element receiving the new last child
        path: Path of the XML file to include
        replacements: Optional ordered literal replacements applied before parsing
        encoding: Codec used to decode the file
        huge_tree: Disable libxml2's safety limits

    Returns:
        The appended copy of the file's root element

    Raises:
        FileOperationError: If the file cannot be read or decoded
        ParseError: If the file is not well-formed XML
        CompositionError: If ``parent`` is not an element
    """
    document = parse(path, replacements, encoding=encoding, huge_tree=huge_tree)
    return append(parent, document)
