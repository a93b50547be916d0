"""Storage backend interface definitions.

Defines the BackendStorage abstract class used by the Store to load and
persist the full key-value mapping. Implementations translate the mapping
to whatever on-disk format they own.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Dict, Mapping


class BackendStorage(ABC):
    """Abstract storage backend.

    A backend owns no data of its own; everything lives in the storage it
    reads and writes.
    """

    name: str = ""

    @abstractmethod
    def load(self) -> Dict[str, str]:
        """Load and return the full mapping.

        Must return an empty dict when nothing has been persisted yet.
        Raise `DeserializationError` (or `CorruptStoreError`) when the
        stored content cannot be decoded into a flat string mapping.
        """

    @abstractmethod
    def persist(self, mapping: Mapping[str, str]) -> None:
        """Replace the stored content with `mapping`.

        Readers must never observe a partially written state.
        """

    @abstractmethod
    def reset(self) -> None:
        """Restore the empty state; `load()` afterwards returns `{}`."""

    @abstractmethod
    def lock(self) -> AbstractContextManager:
        """Return a context manager guarding a load -> persist window."""
