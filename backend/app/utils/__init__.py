"""
Utility modules for the report backend.
"""

from app.utils.validation import (
    epoch_millis,
    is_missing,
    missing_fields,
    parse_float,
    parse_epoch_millis,
)

__all__ = [
    "epoch_millis",
    "is_missing",
    "missing_fields",
    "parse_float",
    "parse_epoch_millis",
]
