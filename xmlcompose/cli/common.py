"""
Common CLI options and callbacks for xmlcompose.

This module provides reusable option classes, callbacks and helpers for CLI commands.
"""

import os
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional

import typer
from lxml import etree
from rich.console import Console
from rich.markup import escape

from xmlcompose import XmlHelper
from xmlcompose.core.exceptions import ValidationError, XmlComposeError
from xmlcompose.core.logging_utils import (
    verbose_callback,
    quiet_callback,
    log_level_callback,
    log_file_callback,
    log_json_callback,
)
from xmlcompose.core.replacements import load_replacements
from xmlcompose.core.settings import Settings

from .completions import (
    complete_xml_files,
    complete_replacement_files,
    complete_encodings,
    complete_query_modes,
)

logger = logging.getLogger("xmlcompose")
err_console = Console(stderr=True)


class CommonOptions:
    """Base class for common command options."""

    @staticmethod
    def apply_to_app(app: typer.Typer):
        """Apply common options to the application."""

        @app.callback()
        def callback(
            verbose: bool = typer.Option(
                False, "--verbose", "-v", help="Enable verbose output", callback=verbose_callback
            ),
            quiet: bool = typer.Option(
                False, "--quiet", "-q", help="Suppress console output", callback=quiet_callback
            ),
            log_level: str = typer.Option(
                "info",
                "--log-level",
                "-l",
                help="Set log level (debug, info, warning, error, critical)",
                callback=log_level_callback,
            ),
            log_file: Optional[str] = typer.Option(
                None, "--log-file", help="Log to file", callback=log_file_callback
            ),
            log_json: bool = typer.Option(
                False, "--log-json", help="Write log records as JSON objects", callback=log_json_callback
            ),
        ):
            """xmlcompose - load, query, compose and render XML documents"""
            # Configure logging (done by callbacks)
            pass


class ConfigOptions:
    """Options for input files and settings."""

    @staticmethod
    def source_file():
        """Argument for the XML source file."""
        return typer.Argument(
            ...,
            help="Path to the XML file",
            callback=file_callback,
            autocompletion=complete_xml_files,
        )

    @staticmethod
    def settings_file():
        """Option for a settings file."""
        return typer.Option(
            None,
            "--settings",
            "-s",
            help="JSON settings file (defaults to ./.xmlcompose.json or ~/.xmlcompose/settings.json)",
        )

    @staticmethod
    def encoding():
        """Option for the input and output encoding."""
        return typer.Option(
            None,
            "--encoding",
            "-e",
            help="Encoding used to read input and declared in output (default from settings, UTF-8)",
            autocompletion=complete_encodings,
        )


class ReplacementOptions:
    """Options for literal text replacements."""

    @staticmethod
    def replace():
        """Option for inline replacements."""
        return typer.Option(
            None,
            "--replace",
            "-r",
            help="Literal replacement as SEARCH=VALUE; repeatable, applied in the given order",
        )

    @staticmethod
    def replacements_file():
        """Option for a replacement map file."""
        return typer.Option(
            None,
            "--replacements",
            help="JSON or YAML file mapping search strings to replacements (applied before --replace)",
            autocompletion=complete_replacement_files,
        )


class OutputOptions:
    """Options for rendered output."""

    @staticmethod
    def cdata():
        """Option for CDATA element names."""
        return typer.Option(
            None,
            "--cdata",
            help="Element name whose text is rendered as CDATA; repeatable",
        )

    @staticmethod
    def indent():
        """Option for the indentation width."""
        return typer.Option(
            None,
            "--indent",
            min=0,
            help="Spaces per indentation level (default from settings, 4)",
        )

    @staticmethod
    def output_file():
        """Option for the output file."""
        return typer.Option(
            None,
            "--output",
            "-o",
            help="Write the rendered document to this file instead of stdout",
            autocompletion=complete_xml_files,
        )


def file_callback(value: str) -> str:
    """
    Validate that the specified file exists.

    Args:
        value: The file path

    Returns:
        The validated file path

    Raises:
        typer.BadParameter: If the file does not exist
    """
    if value is not None and not os.path.exists(value):
        raise typer.BadParameter(f"File does not exist: {value}")
    return value


def mode_callback(value: str) -> str:
    """
    Validate that the query mode is supported.

    Args:
        value: The query mode

    Returns:
        The validated query mode

    Raises:
        typer.BadParameter: If the mode is not supported
    """
    supported_modes = complete_query_modes()
    if value not in supported_modes:
        modes_str = ", ".join(supported_modes)
        raise typer.BadParameter(f"Query mode '{value}' not supported. Valid modes: {modes_str}")
    return value


def parse_replacement_pairs(pairs: Optional[List[str]]) -> Dict[str, str]:
    """
    Parse ``SEARCH=VALUE`` strings into an ordered mapping.

    Only the first ``=`` separates search string and value, so values may
    contain ``=`` themselves.

    Raises:
        ValidationError: If a pair has no ``=`` or an empty search string
    """
    replacements: Dict[str, str] = {}
    for pair in pairs or []:
        search, sep, value = pair.partition("=")
        if not sep or not search:
            raise ValidationError(f"Replacement '{pair}' must have the form SEARCH=VALUE")
        replacements[search] = value
    return replacements


def build_replacements(
    pairs: Optional[List[str]], replacements_file: Optional[Path]
) -> Optional[Dict[str, str]]:
    """
    Combine a replacement file and inline pairs into one ordered mapping.

    File entries come first; inline pairs follow in command-line order. An
    inline pair with the same search string as a file entry replaces its
    value but keeps the file entry's position.

    Returns:
        The mapping, or None if no replacements were given
    """
    replacements: Dict[str, str] = {}
    if replacements_file:
        replacements.update(load_replacements(replacements_file))
    replacements.update(parse_replacement_pairs(pairs))
    return replacements or None


def make_helper(
    settings_file: Optional[Path] = None,
    encoding: Optional[str] = None,
    indent: Optional[int] = None,
) -> XmlHelper:
    """Create a helper whose settings include the command-line overrides."""
    settings = Settings(
        config_file=str(settings_file) if settings_file else None,
        encoding=encoding,
        indent=indent,
    )
    return XmlHelper(settings)


def describe_node(node) -> str:
    """Format a query result for display."""
    if isinstance(node, str):
        return str(node)
    return etree.tostring(node, encoding="unicode", with_tail=False)


def emit_document(
    helper: XmlHelper,
    document: etree._ElementTree,
    cdata: Optional[List[str]],
    output_file: Optional[Path],
) -> None:
    """Render a document to stdout or save it to a file."""
    cdata_elements = list(cdata) if cdata else None
    if output_file:
        path = helper.save(document, str(output_file), cdata_elements)
        err_console.print(f"[green]Saved document to {escape(path)}[/green]")
    else:
        typer.echo(helper.render(document, cdata_elements))


@contextmanager
def handle_errors(action: str) -> Iterator[None]:
    """
    Report library errors on the console and exit with status 1.

    Args:
        action: Short description of what the command was doing
    """
    try:
        yield
    except XmlComposeError as e:
        logger.debug(f"Error {action}: {type(e).__name__}: {e}")
        err_console.print(f"[bold red]Error {action}:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)
