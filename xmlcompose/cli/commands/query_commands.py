"""
Query command for xmlcompose.

Evaluates an XPath expression against a parsed XML file and prints the
matching nodes, or the text or integer value of the first match.
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer

from xmlcompose.core.exceptions import NodeNotFoundError

from ..app import app
from ..common import (
    ConfigOptions,
    ReplacementOptions,
    build_replacements,
    describe_node,
    err_console,
    handle_errors,
    make_helper,
    mode_callback,
)

logger = logging.getLogger("xmlcompose")


@app.command()
def query(
    source: Path = ConfigOptions.source_file(),
    xpath: str = typer.Argument(..., help="XPath expression evaluated against the document"),
    mode: str = typer.Option(
        "all",
        "--mode",
        "-m",
        help="What to print: all matches, the single first match, its string value or its integer value",
        callback=mode_callback,
    ),
    replace: Optional[List[str]] = ReplacementOptions.replace(),
    replacements_file: Optional[Path] = ReplacementOptions.replacements_file(),
    encoding: Optional[str] = ConfigOptions.encoding(),
    settings_file: Optional[Path] = ConfigOptions.settings_file(),
):
    """
    Evaluate an XPath expression against an XML file.

    Examples:
        xmlcompose query site.xml "//server/@name"
        xmlcompose query site.xml "/site/port" --mode int
    """
    logger.debug(f"Querying {source} with '{xpath}' (mode={mode})")

    with handle_errors("querying document"):
        helper = make_helper(settings_file, encoding)
        replacements = build_replacements(replace, replacements_file)
        document = helper.parse_file(source, replacements)

        if mode == "all":
            nodes = helper.query_all(document, xpath)
            if not nodes:
                err_console.print("[yellow]No nodes matched[/yellow]")
            for node in nodes:
                typer.echo(describe_node(node))
        elif mode == "single":
            node = helper.query_single(document, xpath)
            if node is None:
                raise NodeNotFoundError(f"No node matches XPath '{xpath}'", xpath=xpath)
            typer.echo(describe_node(node))
        elif mode == "string":
            typer.echo(helper.query_string(document, xpath))
        else:
            typer.echo(str(helper.query_int(document, xpath)))
