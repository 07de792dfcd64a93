"""
Document serializer for xmlcompose.

Rendering always starts with an explicit declaration line naming the
requested encoding. The body is returned as text; the declared encoding is
not checked against anything, so callers writing the text themselves must
encode it with that same encoding. ``save`` does this for files.
"""

import copy
import logging
import os
import uuid
from typing import Dict, Iterable, Optional, Set, Union

from lxml import etree

from ...constants import CDATA_TERMINATOR, DEFAULT_ENCODING, ERROR_MESSAGES, INDENT_AMOUNT, XML_DECLARATION
from ..exceptions import FileOperationError, SerializationError
from ..logging_utils import log
from .normalizer import clean

logger = logging.getLogger("xmlcompose")

Document = Union[etree._Element, etree._ElementTree]


def _cdata_names(cdata_elements: Optional[Union[str, Iterable[str]]]) -> Set[str]:
    if not cdata_elements:
        return set()
    if isinstance(cdata_elements, str):
        return {cdata_elements}
    return set(cdata_elements)


def _raw_name(element: etree._Element) -> str:
    """Return an element's name as written in the source, prefix included."""
    tag = element.tag
    if tag.startswith("{"):
        local = tag.split("}", 1)[1]
        return f"{element.prefix}:{local}" if element.prefix else local
    return tag


class _CdataSections:
    """
    Placeholders for text slots that are written as CDATA sections.

    lxml can only wrap an element's leading text in CDATA, never the text
    following a child. Every slot is therefore replaced by a unique token
    before serialization and the token is swapped for the section afterwards.
    """

    def __init__(self):
        self.marker = uuid.uuid4().hex
        self.texts: Dict[str, str] = {}

    def hold(self, owner: etree._Element, text: Optional[str]) -> Optional[str]:
        if not text:
            return text
        if CDATA_TERMINATOR in text:
            logger.warning(f"Text of <{owner.tag}> contains '{CDATA_TERMINATOR}' and is rendered escaped instead of as CDATA")
            return text
        token = f"cdata_{self.marker}_{len(self.texts)}_"
        self.texts[token] = text
        return token

    def restore(self, body: str) -> str:
        for token, text in self.texts.items():
            body = body.replace(token, f"<![CDATA[{text}]]>", 1)
        return body


def _wrap_cdata(root: etree._Element, names: Set[str]) -> _CdataSections:
    """Mark every text slot directly inside the named elements for CDATA output."""
    sections = _CdataSections()
    for element in root.iter(tag=etree.Element):
        if _raw_name(element) not in names:
            continue
        element.text = sections.hold(element, element.text)
        for child in element:
            child.tail = sections.hold(element, child.tail)
    return sections


def render(
    document: Document,
    cdata_elements: Optional[Union[str, Iterable[str]]] = None,
    encoding: str = DEFAULT_ENCODING,
    indent: int = INDENT_AMOUNT,
) -> str:
    """
    Render a document as indented XML text.

    The document is normalized in place first. Indentation and CDATA
    wrapping are applied to a copy, so the document itself keeps no
    formatting whitespace.

    Args:
        document: ElementTree or root element to render
        cdata_elements: Names of elements whose text is emitted as CDATA
        encoding: Encoding named in the declaration line
        indent: Spaces per indentation level

    Returns:
        The declaration line followed by the rendered document

    Raises:
        SerializationError: If the document cannot be rendered
    """
    root = document.getroot() if isinstance(document, etree._ElementTree) else document
    if root is None:
        raise SerializationError("Document has no root element")

    clean(root)
    names = _cdata_names(cdata_elements)

    try:
        rendered = copy.deepcopy(root)
        rendered.tail = None
        sections = _wrap_cdata(rendered, names)
        if sections.texts:
            logger.debug(f"Writing {len(sections.texts)} text slot(s) as CDATA")
        etree.indent(rendered, space=" " * indent)
        body = sections.restore(etree.tostring(rendered, method="xml", encoding="unicode"))
    except (etree.LxmlError, ValueError, TypeError) as e:
        error_msg = ERROR_MESSAGES["render_failed"].format(error=e)
        logger.debug(error_msg)
        raise SerializationError(error_msg) from e

    return XML_DECLARATION.format(encoding=encoding) + body


def save(
    document: Document,
    path: Union[str, os.PathLike],
    cdata_elements: Optional[Union[str, Iterable[str]]] = None,
    encoding: str = DEFAULT_ENCODING,
    indent: int = INDENT_AMOUNT,
) -> str:
    """
    Render a document and write it to a file in the declared encoding.

    Args:
        document: ElementTree or root element to render
        path: Target file path; missing parent directories are created
        cdata_elements: Names of elements whose text is emitted as CDATA
        encoding: Encoding named in the declaration and used for the bytes
        indent: Spaces per indentation level

    Returns:
        The path written

    Raises:
        SerializationError: If rendering fails or the text cannot be encoded
        FileOperationError: If the file cannot be written
    """
    path = os.fspath(path)
    text = render(document, cdata_elements, encoding=encoding, indent=indent)

    try:
        data = text.encode(encoding)
    except LookupError as e:
        error_msg = ERROR_MESSAGES["unknown_encoding"].format(encoding=encoding)
        logger.debug(error_msg)
        raise SerializationError(error_msg) from e
    except UnicodeEncodeError as e:
        error_msg = f"Document cannot be encoded as {encoding}: {e}"
        logger.debug(error_msg)
        raise SerializationError(error_msg) from e

    logger.info(f"Saving XML document to: {path}")
    try:
        output_dir = os.path.dirname(os.path.abspath(path))
        if output_dir:
            os.makedirs(output_dir, exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)
    except OSError as e:
        error_msg = f"Unable to write {path}: {e}"
        logger.debug(error_msg)
        raise FileOperationError(error_msg) from e

    log("Saved XML document", "info", {"path": path, "bytes": len(data), "encoding": encoding})
    return path
