"""
Input Validation Utilities
===========================

Small helpers shared by the request models, the data layer and the
upload handler.
"""

import math
import re
from typing import Any


DEFAULT_LIMIT = 50
MAX_LIMIT = 500

MODEL_EXTENSIONS = (".glb", ".gltf")

_UNSAFE_FILENAME_CHARS = re.compile(r'[^A-Za-z0-9_.-]')


def is_number(value: Any) -> bool:
    """
    True for real JSON numbers only.

    Booleans are ints in Python but not numbers on the wire, and numeric
    strings like "42" don't count either.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints with hundreds of digits don't fit in a float column
        return False


def clamp_limit(limit: Any) -> int:
    """
    Turn a user supplied ``limit`` into something between 1 and 500.

    Missing, zero or unparsable values fall back to 50. Never raises.

    Examples:
        clamp_limit(None)   -> 50
        clamp_limit("10")   -> 10
        clamp_limit(1000)   -> 500
        clamp_limit("abc")  -> 50
    """
    try:
        number = int(float(limit))
    except (TypeError, ValueError, OverflowError):
        number = 0
    return max(1, min(MAX_LIMIT, number or DEFAULT_LIMIT))


def sanitize_filename(name: str) -> str:
    """
    Sanitize a filename by replacing anything outside ``[A-Za-z0-9_.-]``.

    Args:
        name: Original filename (as sent by the browser)

    Returns:
        Filename safe to drop into the uploads directory
    """
    return _UNSAFE_FILENAME_CHARS.sub('_', name)


def is_model_file(filename: str) -> bool:
    """Check for a .glb / .gltf extension (case-insensitive)."""
    return bool(filename) and filename.lower().endswith(MODEL_EXTENSIONS)
