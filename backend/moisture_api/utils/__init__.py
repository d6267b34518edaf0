"""
Utility modules for the soil moisture backend.
"""

from moisture_api.utils.errors import (
    ApiError,
    ValidationError,
    NotFoundError,
    InternalError,
    register_error_handlers,
)
from moisture_api.utils.validation import (
    is_number,
    clamp_limit,
    sanitize_filename,
    is_model_file,
)

__all__ = [
    "ApiError",
    "ValidationError",
    "NotFoundError",
    "InternalError",
    "register_error_handlers",
    "is_number",
    "clamp_limit",
    "sanitize_filename",
    "is_model_file",
]
