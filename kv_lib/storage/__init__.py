"""Storage abstraction package for the key-value store."""
from __future__ import annotations
from pathlib import Path
from typing import Dict, Optional, Type

from .base import BackendStorage
from .file_backend import FileBackendStorage
from .interfaces import StorageProtocol
from .memory_backend import MemoryBackendStorage
from .serializer import BSONSerializer, JSONSerializer, Serializer

# Closed set of on-disk formats. Adding a format means registering its
# serializer here; Store never looks at the format.
SERIALIZERS: Dict[str, Type[Serializer]] = {
    "json": JSONSerializer,
    "bson": BSONSerializer,
}

DEFAULT_FILE_NAMES: Dict[str, str] = {
    "json": "kv.db",
    "bson": "kv.bson",
}

# Formats whose reset removes the file rather than writing `{}`
_REMOVE_ON_RESET = {"bson"}


def normalize_serializer_name(name: str) -> str:
    """Map a user-facing format name (`Json`, `BSON`, ...) to its registry key."""
    key = (name or "").strip().lower()
    if key not in SERIALIZERS and key != "memory":
        raise ValueError("Serializer must be either Json or Bson")
    return key


def create_storage(
    serializer: str = "bson",
    data_dir: str | Path = ".",
    file_path: Optional[str | Path] = None,
    use_lock: bool = True,
) -> StorageProtocol:
    """Build the backend for `serializer`.

    `file_path` overrides the default `<data_dir>/kv.db` / `<data_dir>/kv.bson`
    location. The `memory` serializer returns a fresh in-process backend and
    ignores the path arguments.
    """
    key = normalize_serializer_name(serializer)
    if key == "memory":
        return MemoryBackendStorage()
    path = Path(file_path) if file_path else Path(data_dir) / DEFAULT_FILE_NAMES[key]
    return FileBackendStorage(
        path,
        SERIALIZERS[key](),
        use_lock=use_lock,
        remove_on_reset=key in _REMOVE_ON_RESET,
    )


__all__ = [
    "BackendStorage",
    "StorageProtocol",
    "FileBackendStorage",
    "MemoryBackendStorage",
    "Serializer",
    "JSONSerializer",
    "BSONSerializer",
    "SERIALIZERS",
    "DEFAULT_FILE_NAMES",
    "normalize_serializer_name",
    "create_storage",
]
