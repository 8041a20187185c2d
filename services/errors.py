from __future__ import annotations


class ResolutionError(Exception):
    """Base class for errors raised while resolving an import row."""


class ValidationError(ResolutionError):
    """The incoming row cannot be processed (e.g. missing name, unknown decision)."""


class StoreError(ResolutionError):
    """The backing store failed to read or write a founder."""
