"""
Error Types
===========

Everything that can go wrong while handling a report request.

    ValidationError     -> 400 (the client sent something we can't store)
    StoreReadError      -> 500 (Firestore read failed)
    StoreWriteError     -> 500 (Firestore write/delete failed)
    ConfigurationError  -> 500 (no usable Firestore client at all)

Messages on these errors end up in HTTP responses, so they must never
include credential material.
"""

from typing import Optional


class ReportError(Exception):
    """Base class for all report backend errors."""


class ValidationError(ReportError):
    """
    The payload for `kind` is missing required fields or has fields that
    are not numbers.

    Attributes:
        kind: The record kind being normalized
        missing: Required fields that were absent (or null)
        invalid: Fields that were present but not numeric
    """

    def __init__(self, kind, missing=None, invalid=None, message=None):
        self.kind = kind
        self.missing = list(missing or [])
        self.invalid = list(invalid or [])
        super().__init__(message or self._build_message())

    def _build_message(self) -> str:
        label = getattr(self.kind, "label", str(self.kind))
        parts = []
        if self.missing:
            parts.append(f"Missing required fields for {label}: {', '.join(self.missing)}")
        if self.invalid:
            parts.append(f"Invalid numeric fields for {label}: {', '.join(self.invalid)}")
        return "; ".join(parts) or f"Invalid {label}"


class StoreError(ReportError):
    """A Firestore call failed for `kind` while doing `operation`."""

    def __init__(self, kind, operation: str, detail: Optional[str] = None):
        self.kind = kind
        self.operation = operation
        self.detail = detail
        name = getattr(kind, "collection", str(kind))
        message = f"{operation} failed on {name}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class StoreReadError(StoreError):
    """Reading a collection failed."""


class StoreWriteError(StoreError):
    """
    Inserting or deleting failed.

    For bulk deletes, `deleted` is how many documents were already
    committed before the failing batch.
    """

    def __init__(self, kind, operation: str, detail: Optional[str] = None, deleted: int = 0):
        self.deleted = deleted
        super().__init__(kind, operation, detail)


class ConfigurationError(ReportError):
    """The Firestore client could not be created at startup."""
