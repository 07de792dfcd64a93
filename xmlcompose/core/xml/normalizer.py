"""
Whitespace normalization for parsed documents.

lxml keeps character data in ``.text`` (before the first child) and
``.tail`` (after each child) instead of separate text nodes. Every one of
these slots corresponds to a text node, and the normalizer treats them that
way: a slot that holds only XML whitespace is dropped when its parent also
has element or comment children, so the serializer can indent freely.
Parents whose only content is text are left alone.
"""

import logging
from typing import Optional, Union

from lxml import etree

from ...constants import XML_WHITESPACE

logger = logging.getLogger("xmlcompose")


def is_blank(text: Optional[str]) -> bool:
    """Return True if a text slot is missing, empty or XML whitespace only."""
    return not text or not text.strip(XML_WHITESPACE)


def _is_element(node) -> bool:
    return isinstance(node, etree._Element) and isinstance(node.tag, str)


def _is_structural(node) -> bool:
    return _is_element(node) or isinstance(node, etree._Comment)


def _remove_blank_text(parent: etree._Element) -> int:
    removed = 0
    if parent.text is not None and is_blank(parent.text):
        parent.text = None
        removed += 1
    for child in parent:
        if child.tail is not None and is_blank(child.tail):
            child.tail = None
            removed += 1
    return removed


def clean(node: Union[etree._Element, etree._ElementTree]) -> Union[etree._Element, etree._ElementTree]:
    """
    Remove formatting whitespace from a document or subtree, in place.

    For each element, its children are scanned; if any child is an element
    or a comment the element is eligible, and each of its whitespace-only
    text slots is removed. Element children are processed the same way.
    The walk uses an explicit stack, so tree depth is not limited by the
    interpreter's recursion limit.

    Args:
        node: Element or ElementTree to normalize

    Returns:
        The same object that was passed in
    """
    start = node.getroot() if isinstance(node, etree._ElementTree) else node
    if start is None or not _is_element(start):
        return node

    removed = 0
    stack = [start]
    while stack:
        parent = stack.pop()
        eligible = False
        for child in parent:
            if _is_structural(child):
                eligible = True
                if _is_element(child):
                    stack.append(child)
        if eligible:
            removed += _remove_blank_text(parent)

    if removed:
        logger.debug(f"Removed {removed} whitespace-only text node(s) below <{start.tag}>")
    return node
