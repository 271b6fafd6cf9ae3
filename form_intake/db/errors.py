"""
Persistence-layer exceptions raised by the database handle and repositories.
"""

from __future__ import annotations


class PersistenceError(RuntimeError):
    """Base exception for failures writing to or reading from the store."""


class DatabaseUnavailableError(PersistenceError):
    """Raised when a connection to the database cannot be established."""


class DuplicateRecordError(PersistenceError):
    """Raised when a write violates a unique or integrity constraint."""
