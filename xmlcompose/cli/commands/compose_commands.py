"""
Compose command for xmlcompose.

Appends the root elements of one or more XML files under a node of a base
document and renders the result.
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer

from xmlcompose.core.exceptions import NodeNotFoundError

from ..app import app
from ..common import (
    ConfigOptions,
    OutputOptions,
    ReplacementOptions,
    build_replacements,
    emit_document,
    file_callback,
    handle_errors,
    make_helper,
)

logger = logging.getLogger("xmlcompose")


def _includes_callback(values: Optional[List[Path]]) -> Optional[List[Path]]:
    for value in values or []:
        file_callback(value)
    return values


@app.command()
def compose(
    source: Path = ConfigOptions.source_file(),
    at: str = typer.Option(
        ...,
        "--at",
        "-a",
        help="XPath of the node receiving the included documents",
    ),
    include: List[Path] = typer.Option(
        ...,
        "--include",
        "-i",
        help="XML file whose root element is appended; repeatable, appended in order",
        callback=_includes_callback,
    ),
    replace: Optional[List[str]] = ReplacementOptions.replace(),
    replacements_file: Optional[Path] = ReplacementOptions.replacements_file(),
    cdata: Optional[List[str]] = OutputOptions.cdata(),
    encoding: Optional[str] = ConfigOptions.encoding(),
    indent: Optional[int] = OutputOptions.indent(),
    output_file: Optional[Path] = OutputOptions.output_file(),
    settings_file: Optional[Path] = ConfigOptions.settings_file(),
):
    """
    Append included XML files under a node of a base document.

    Replacements apply to the base document and to every included file.

    Example:
        xmlcompose compose site.xml --at /site/modules -i auth.xml -i cache.xml -o out.xml
    """
    logger.debug(f"Composing {len(include)} file(s) into {source} at '{at}'")

    with handle_errors("composing documents"):
        helper = make_helper(settings_file, encoding, indent)
        replacements = build_replacements(replace, replacements_file)
        document = helper.parse_file(source, replacements)

        parent = helper.query_single(document, at)
        if parent is None:
            raise NodeNotFoundError(f"No node matches XPath '{at}'", xpath=at)

        for path in include:
            helper.append_file(parent, str(path), replacements)
            logger.info(f"Included {path}")

        emit_document(helper, document, cdata, output_file)
