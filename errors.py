"""
Store errors

Every failure the record store reports derives from StoreError so the HTTP
layer can map it to a response without knowing about files or JSON.
"""

from typing import Any, Optional


class StoreError(Exception):
    """Base exception for record store errors."""

    pass


class LoadError(StoreError):
    """A collection file is missing or cannot be decoded."""

    def __init__(self, message: str, missing: bool = False):
        super().__init__(message)
        self.missing = missing


class ValidationError(StoreError):
    """An order submission was rejected before any state changed."""

    pass


class NotFoundError(StoreError):
    """No order carries the requested id."""

    def __init__(self, order_id: int):
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class PersistenceError(StoreError):
    """
    A write to disk failed.

    The in-memory change that preceded the write has already been applied;
    ``record`` holds the affected order (if any) so callers can still report it.
    """

    def __init__(self, message: str, record: Optional[Any] = None):
        super().__init__(message)
        self.record = record


class WriteError(PersistenceError):
    """Raised by the storage gateway when a document cannot be written."""

    pass


class RecoveryError(PersistenceError):
    """Raised when a collection cannot even be reset to its default on disk."""

    pass
