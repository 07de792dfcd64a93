"""
XPath query facade for xmlcompose.

This module evaluates XPath 1.0 expressions against parsed documents.
Unprefixed elements are matched by their plain tag names, since the loader
moves them out of any default namespace. Prefixes declared anywhere in the
document can be used as written, for example ``//xsi:schemaLocation`` or
``/manifest/@xsi:noNamespaceSchemaLocation``.

Expressions evaluated against an ElementTree start from the document node,
as in XPath 1.0, so ``site/name`` selects the ``name`` children of a root
element named ``site``. Against an element they start from that element.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple, Union

from lxml import etree

from ...constants import ERROR_MESSAGES, XML_NAMESPACE
from ..exceptions import FormatError, NodeNotFoundError, XPathError

logger = logging.getLogger("xmlcompose")

Ancestor = Union[etree._Element, etree._ElementTree]

# Same accepted syntax as a plain base-10 integer literal: optional sign, ASCII digits
_INTEGER = re.compile(r"[+-]?[0-9]+")

# A name followed by "(" is a function call unless it is a node type test
_CALL = re.compile(r"[A-Za-z_][\w.-]*(?::[A-Za-z_][\w.-]*)?\s*\(")
_NODE_TYPES = ("node", "text", "comment", "processing-instruction")
_NUMBER = re.compile(r"\.?[0-9]")
_PREFIX_COLON = re.compile(r"(?<!:):(?!:)")


def _split_union(xpath: str) -> List[str]:
    """Split an expression on the ``|`` operators outside brackets and literals."""
    parts = []
    depth = 0
    quote = None
    start = 0
    for index, char in enumerate(xpath):
        if quote:
            if char == quote:
                quote = None
        elif char in "'\"":
            quote = char
        elif char in "([":
            depth += 1
        elif char in ")]":
            depth -= 1
        elif char == "|" and depth == 0:
            parts.append(xpath[start:index])
            start = index + 1
    parts.append(xpath[start:])
    return parts


def _is_relative_path(branch: str) -> bool:
    branch = branch.strip()
    if not branch or branch == "." or branch[0] in "/($'\"-" or _NUMBER.match(branch):
        return False
    call = _CALL.match(branch)
    return call is None or call.group(0).rstrip("( \t\r\n") in _NODE_TYPES


def _from_document_node(xpath: str) -> str:
    """
    Rewrite an expression so it can be evaluated from the root element.

    lxml evaluates expressions on an ElementTree with the root element as
    context node. Each relative location path is prefixed with ``../`` to
    step up to the document node first. ``.`` stays on the root element,
    since lxml cannot return the document node itself.
    """
    branches = _split_union(xpath)
    rewritten = [
        "../" + branch.lstrip() if _is_relative_path(branch) else branch
        for branch in branches
    ]
    return "|".join(rewritten)


def _context(ancestor: Ancestor, xpath: str) -> Tuple[Any, str]:
    if isinstance(ancestor, etree._ElementTree):
        root = ancestor.getroot()
        if root is not None:
            return root, _from_document_node(xpath)
    return ancestor, xpath


def _document_prefixes(node, xpath: str) -> Dict[str, str]:
    """Collect the prefixes declared in a node's document, first declaration wins."""
    prefixes: Dict[str, str] = {}
    if not _PREFIX_COLON.search(xpath):
        return prefixes
    for prefix, uri in node.xpath("//namespace::*"):
        if prefix and uri != XML_NAMESPACE:
            prefixes.setdefault(prefix, uri)
    return prefixes


def query_all(ancestor: Ancestor, xpath: str) -> List[Any]:
    """
    Find all nodes matching an XPath expression.

    Args:
        ancestor: Element or ElementTree the expression is evaluated against
        xpath: XPath expression, relative to ``ancestor`` (the document node
            for an ElementTree)

    Returns:
        List of matching nodes in document order. Besides elements this may
        contain comments, processing instructions and the string results
        lxml produces for ``text()`` and attribute steps.

    Raises:
        XPathError: If the expression is invalid, cannot be evaluated or does
            not select a node set
    """
    context, expression = _context(ancestor, xpath)
    try:
        result = context.xpath(expression, namespaces=_document_prefixes(context, expression))
    except etree.XPathError as e:
        error_msg = ERROR_MESSAGES["xpath_invalid"].format(xpath=xpath, error=e)
        logger.debug(error_msg)
        raise XPathError(error_msg) from e

    if not isinstance(result, list):
        error_msg = ERROR_MESSAGES["xpath_not_nodeset"].format(xpath=xpath, kind=type(result).__name__)
        logger.debug(error_msg)
        raise XPathError(error_msg)

    logger.debug(f"XPath '{xpath}' matched {len(result)} node(s)")
    return result


def query_single(ancestor: Ancestor, xpath: str) -> Optional[Any]:
    """
    Find the first node matching an XPath expression.

    Args:
        ancestor: Element or ElementTree the expression is evaluated against
        xpath: XPath expression, relative to ``ancestor``

    Returns:
        First matching node in document order, or None if nothing matched

    Raises:
        XPathError: If the expression is invalid or does not select a node set
    """
    nodes = query_all(ancestor, xpath)
    return nodes[0] if nodes else None


def node_text(node: Any) -> str:
    """
    Return the first text value of a query result.

    Elements yield the text before their first child (an empty string when
    there is none), comments and processing instructions yield their content,
    and string results from ``text()`` or attribute steps are returned as
    plain strings.
    """
    if isinstance(node, str):
        return str(node)
    return node.text or ""


def query_string(ancestor: Ancestor, xpath: str) -> str:
    """
    Get the text value of the node matching an XPath expression.

    Args:
        ancestor: Element or ElementTree the expression is evaluated against
        xpath: XPath expression, relative to ``ancestor``

    Returns:
        Text value of the first matching node

    Raises:
        XPathError: If the expression is invalid
        NodeNotFoundError: If no node matches
    """
    node = query_single(ancestor, xpath)
    if node is None:
        error_msg = ERROR_MESSAGES["node_not_found"].format(xpath=xpath)
        logger.debug(error_msg)
        raise NodeNotFoundError(error_msg, xpath=xpath)
    return node_text(node)


def query_int(ancestor: Ancestor, xpath: str) -> int:
    """
    Get the value of the node matching an XPath expression as an integer.

    Args:
        ancestor: Element or ElementTree the expression is evaluated against
        xpath: XPath expression, relative to ``ancestor``

    Returns:
        The parsed integer

    Raises:
        XPathError: If the expression is invalid
        NodeNotFoundError: If no node matches
        FormatError: If the value is not a base-10 integer
    """
    value = query_string(ancestor, xpath)
    if not _INTEGER.fullmatch(value):
        error_msg = ERROR_MESSAGES["not_an_integer"].format(value=value, xpath=xpath)
        logger.debug(error_msg)
        raise FormatError(error_msg, value=value)
    return int(value)


class XmlQuery:
    """
    Query helper bound to one ancestor node.

    Provides the module-level query functions as methods so a caller can run
    several queries against the same context node.
    """

    def __init__(self, ancestor: Ancestor):
        """
        Initialize with the node queries are evaluated against.

        Args:
            ancestor: Element or ElementTree
        """
        self.ancestor = ancestor

    @property
    def xml_root(self) -> etree._Element:
        """Get the underlying root element."""
        if isinstance(self.ancestor, etree._ElementTree):
            return self.ancestor.getroot()
        return self.ancestor

    def find_all(self, xpath: str) -> List[Any]:
        """Find all nodes matching an XPath expression."""
        return query_all(self.ancestor, xpath)

    def find(self, xpath: str) -> Optional[Any]:
        """Find the first node matching an XPath expression, or None."""
        return query_single(self.ancestor, xpath)

    def get_string(self, xpath: str) -> str:
        """Get the text value of the node matching an XPath expression."""
        return query_string(self.ancestor, xpath)

    def get_int(self, xpath: str) -> int:
        """Get the integer value of the node matching an XPath expression."""
        return query_int(self.ancestor, xpath)

    def exists(self, xpath: str) -> bool:
        """Check whether at least one node matches an XPath expression."""
        return bool(query_all(self.ancestor, xpath))

    def count(self, xpath: str) -> int:
        """Count the nodes matching an XPath expression."""
        return len(query_all(self.ancestor, xpath))
