"""
Literal text replacement for xmlcompose.

Replacement maps are applied to the raw text of a document before it is
parsed. Each search string is replaced literally (no pattern matching), one
key at a time and in the map's iteration order, so a later key sees the
output of the earlier ones. Callers that need a stable result must supply an
ordered mapping.
"""

import json
import logging
import os
from collections.abc import Mapping
from typing import Any, Dict, Iterable, Optional, Tuple, Union

import yaml

from ..constants import REPLACEMENT_FILE_TYPES
from .exceptions import FileOperationError, ValidationError

logger = logging.getLogger("xmlcompose")

ReplacementMap = Union[Mapping, Iterable[Tuple[str, Any]]]


def _iter_pairs(replacements: ReplacementMap) -> Iterable[Tuple[Any, Any]]:
    if isinstance(replacements, Mapping):
        return replacements.items()
    return replacements


def apply_replacements(text: str, replacements: Optional[ReplacementMap]) -> str:
    """
    Apply literal substring replacements to a text.

    Args:
        text: Text to transform
        replacements: Ordered mapping (or sequence of pairs) from search string
            to replacement value. ``None`` or an empty map leaves the text as is.

    Returns:
        The transformed text

    Raises:
        ValidationError: If a search string is empty or not a string
    """
    if not replacements:
        return text

    count = 0
    for search, replace in _iter_pairs(replacements):
        if not isinstance(search, str) or not search:
            raise ValidationError(f"Replacement search strings must be non-empty strings, got {search!r}")
        replace = "" if replace is None else str(replace)
        if search in text:
            text = text.replace(search, replace)
            count += 1

    logger.debug(f"Applied {count} replacement key(s)")
    return text


def load_replacements(path: Union[str, os.PathLike]) -> Dict[str, str]:
    """
    Load an ordered replacement map from a JSON or YAML file.

    Args:
        path: Path to a ``.json``, ``.yaml`` or ``.yml`` file holding a mapping

    Returns:
        Dictionary of search string to replacement string, in file order

    Raises:
        FileOperationError: If the file cannot be read or decoded
        ValidationError: If the file type is unsupported or the content is not a mapping
    """
    path = os.fspath(path)
    extension = os.path.splitext(path)[1].lower()
    file_type = REPLACEMENT_FILE_TYPES.get(extension)
    if file_type is None:
        supported = ", ".join(sorted(REPLACEMENT_FILE_TYPES))
        raise ValidationError(f"Unsupported replacement file type '{extension}' (expected one of {supported})")

    logger.info(f"Loading replacements from {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            if file_type == "json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Unable to read replacement file {path}: {e}")
        raise FileOperationError(f"Unable to read replacement file {path}: {e}") from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        logger.debug(f"Malformed replacement file {path}: {e}")
        raise ValidationError(f"Malformed replacement file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(f"Replacement file {path} must contain a mapping, got {type(data).__name__}")

    return {str(key): ("" if value is None else str(value)) for key, value in data.items()}
