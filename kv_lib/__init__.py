"""Local file-backed key-value store."""

from .errors import (
    KVError,
    KeyNotFound,
    InvalidPattern,
    DeserializationError,
    CorruptStoreError,
    SerializationError,
    StorageIOError,
)
from .storage import create_storage
from .store import Store

__all__ = [
    "Store",
    "create_storage",
    "KVError",
    "KeyNotFound",
    "InvalidPattern",
    "DeserializationError",
    "CorruptStoreError",
    "SerializationError",
    "StorageIOError",
]
