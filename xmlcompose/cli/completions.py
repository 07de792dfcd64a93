"""
Auto-completion functions for the xmlcompose CLI.

This module provides common auto-completion functions used across the CLI.
"""

import os
from pathlib import Path
from typing import List

from xmlcompose.constants import QUERY_MODES, REPLACEMENT_FILE_TYPES


def complete_xml_files() -> List[Path]:
    """
    Auto-complete XML file paths.
    Returns XML files in the current directory.
    """
    return [Path(f) for f in os.listdir(".") if f.endswith((".xml", ".XML")) and os.path.isfile(f)]


def complete_replacement_files() -> List[Path]:
    """
    Auto-complete replacement map files.
    Returns JSON and YAML files in the current directory.
    """
    return [
        Path(f) for f in os.listdir(".")
        if os.path.splitext(f)[1].lower() in REPLACEMENT_FILE_TYPES and os.path.isfile(f)
    ]


def complete_encodings() -> List[str]:
    """
    Auto-complete common encodings.
    """
    return ["UTF-8", "UTF-16", "ISO-8859-1", "ISO-8859-15", "windows-1252", "US-ASCII"]


def complete_query_modes() -> List[str]:
    """
    Auto-complete query modes.
    """
    return list(QUERY_MODES)
