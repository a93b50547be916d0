"""Error types raised by the key-value store.

Every backend and store operation raises a subclass of `KVError`; only the
CLI turns these into messages and exit codes.
"""
from __future__ import annotations


class KVError(Exception):
    """Base class for all store errors."""


class KeyNotFound(KVError, KeyError):
    """Raised when an operation requires a key that is not present."""

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        # KeyError would otherwise render the repr of the key
        return f"Key not found {self.key}"


class InvalidPattern(KVError):
    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")
        self.pattern = pattern


class DeserializationError(KVError):
    """The backing file exists but could not be decoded."""


class CorruptStoreError(DeserializationError):
    """The backing file decoded, but not into a flat string-to-string mapping."""


class SerializationError(KVError):
    """The in-memory mapping could not be encoded."""


class StorageIOError(KVError):
    """Reading, writing or removing the backing file failed."""
