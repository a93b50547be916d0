"""File-backed storage backend holding the whole mapping in one file.

The backend reads and writes a single configured file through a
`Serializer`. It provides atomic writes by writing to a temporary file,
fsyncing it, then renaming it over the target.
"""
from __future__ import annotations
import contextlib
import logging
import os
from pathlib import Path
from typing import Dict, Mapping

from pydantic import TypeAdapter, ValidationError

from kv_lib.errors import CorruptStoreError, StorageIOError
from .base import BackendStorage
from .locks import file_lock
from .serializer import Serializer

logger = logging.getLogger(__name__)

_MAPPING = TypeAdapter(Dict[str, str])


class FileBackendStorage(BackendStorage):
    """Backend that targets a single on-disk file.

    Parameters
    - file_path: path to the backing file. A missing file loads as `{}`.
    - serializer: codec turning the mapping into bytes and back.
    - use_lock: take an advisory lock on `<file_path>.lock` in `lock()`.
    - remove_on_reset: `reset()` deletes the file instead of writing an
      empty mapping. Either way `load()` afterwards returns `{}`.
    """

    def __init__(
        self,
        file_path: str | Path,
        serializer: Serializer,
        *,
        use_lock: bool = True,
        remove_on_reset: bool = False,
    ) -> None:
        self.file_path = Path(file_path)
        self.serializer = serializer
        self.name = serializer.name
        self.use_lock = use_lock
        self.remove_on_reset = remove_on_reset

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.file_path)!r}, {self.name})"

    def load(self) -> Dict[str, str]:
        path = self.file_path
        try:
            with open(path, "rb") as f:
                data = f.read()
        except FileNotFoundError:
            logger.debug("%s does not exist yet; starting empty", path)
            return {}
        except OSError as e:
            raise StorageIOError(f"An error occurred {e}") from e
        logger.debug("Loaded %s (%d bytes)", path, len(data))

        raw = self.serializer.load(data)
        try:
            return _MAPPING.validate_python(raw, strict=True)
        except ValidationError as e:
            raise CorruptStoreError(
                f"Corrupt store {path}: expected a flat string-to-string mapping"
            ) from e

    def persist(self, mapping: Mapping[str, str]) -> None:
        payload = self.serializer.dump(mapping)
        path = self.file_path
        tmp = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "wb") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            tmp.replace(path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise StorageIOError(f"An error occurred {e}") from e
        logger.debug("Persisted %d keys to %s (%d bytes)", len(mapping), path, len(payload))

    def reset(self) -> None:
        if not self.remove_on_reset:
            self.persist({})
            return
        try:
            self.file_path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageIOError(f"An error occurred {e}") from e
        logger.debug("Removed %s", self.file_path)

    def lock(self) -> contextlib.AbstractContextManager:
        if not self.use_lock:
            return contextlib.nullcontext()
        return file_lock(self.file_path)
