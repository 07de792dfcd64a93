"""
Render command for xmlcompose.

Parses an XML file with optional literal replacements and writes it back as
indented XML with an explicit declaration.
"""

import logging
from pathlib import Path
from typing import List, Optional

from ..app import app
from ..common import (
    ConfigOptions,
    OutputOptions,
    ReplacementOptions,
    build_replacements,
    emit_document,
    handle_errors,
    make_helper,
)

logger = logging.getLogger("xmlcompose")


@app.command()
def render(
    source: Path = ConfigOptions.source_file(),
    replace: Optional[List[str]] = ReplacementOptions.replace(),
    replacements_file: Optional[Path] = ReplacementOptions.replacements_file(),
    cdata: Optional[List[str]] = OutputOptions.cdata(),
    encoding: Optional[str] = ConfigOptions.encoding(),
    indent: Optional[int] = OutputOptions.indent(),
    output_file: Optional[Path] = OutputOptions.output_file(),
    settings_file: Optional[Path] = ConfigOptions.settings_file(),
):
    """
    Parse an XML file and render it as indented XML.

    Example:
        xmlcompose render site.xml -r @HOST@=example.org --cdata description -o out.xml
    """
    logger.debug(f"Rendering {source}")

    with handle_errors("rendering document"):
        helper = make_helper(settings_file, encoding, indent)
        replacements = build_replacements(replace, replacements_file)
        document = helper.parse_file(source, replacements)
        emit_document(helper, document, cdata, output_file)
