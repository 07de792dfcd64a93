"""
CLI package for xmlcompose.

This module organizes the command-line interface into a modular structure.
"""

from .app import app

# Import commands to register them with the CLI
# This must be after importing app to avoid circular imports
from .commands import (
    render_commands,
    query_commands,
    compose_commands,
)

__all__ = ["app"]
