"""
Main CLI application for xmlcompose.

This module provides the main Typer application. Command modules register
their commands on ``app`` when they are imported.
"""

import logging

import typer

from .common import CommonOptions

# Create main Typer app with auto-completion support
app = typer.Typer(
    help="xmlcompose CLI",
    add_completion=True,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Apply common options to the app
CommonOptions.apply_to_app(app)

# Clear all existing handlers to avoid duplication
xmlcompose_logger = logging.getLogger("xmlcompose")
for handler in xmlcompose_logger.handlers[:]:
    xmlcompose_logger.removeHandler(handler)

# Diagnostics go to stderr so rendered documents on stdout stay clean
handler = logging.StreamHandler()
handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
xmlcompose_logger.addHandler(handler)
xmlcompose_logger.setLevel(logging.INFO)
