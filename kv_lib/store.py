"""Store: key-value operations over a single storage backend.

Each operation loads the full mapping from the backend, works on it in
memory and, for mutating operations, persists the full mapping again while
holding the backend's lock.
"""
from __future__ import annotations

import logging
import re
from typing import List

from kv_lib.errors import InvalidPattern, KeyNotFound
from kv_lib.storage.interfaces import StorageProtocol

logger = logging.getLogger(__name__)


class Store:
    def __init__(self, storage: StorageProtocol):
        self.storage = storage

    def __repr__(self) -> str:
        return f"Store({self.storage!r})"

    def get(self, key: str) -> str:
        mapping = self.storage.load()
        try:
            return mapping[key]
        except KeyError:
            raise KeyNotFound(key) from None

    def set(self, key: str, value: str) -> None:
        with self.storage.lock():
            mapping = self.storage.load()
            mapping[key] = value
            self.storage.persist(mapping)
        logger.debug("set %r (%d chars)", key, len(value))

    def delete(self, key: str) -> None:
        with self.storage.lock():
            mapping = self.storage.load()
            if key not in mapping:
                raise KeyNotFound(key)
            del mapping[key]
            self.storage.persist(mapping)
        logger.debug("deleted %r", key)

    def exists(self, key: str) -> bool:
        return key in self.storage.load()

    def rename(self, key: str, new_key: str) -> None:
        """Move the value of `key` to `new_key`.

        An existing `new_key` is overwritten without error.
        """
        with self.storage.lock():
            mapping = self.storage.load()
            if key not in mapping:
                raise KeyNotFound(key)
            if new_key in mapping and new_key != key:
                logger.debug("rename %r overwrites existing %r", key, new_key)
            mapping[new_key] = mapping.pop(key)
            self.storage.persist(mapping)
        logger.debug("renamed %r to %r", key, new_key)

    def append(self, key: str, suffix: str) -> None:
        """Concatenate `suffix` onto the value of an existing key.

        Never creates the key.
        """
        with self.storage.lock():
            mapping = self.storage.load()
            if key not in mapping:
                raise KeyNotFound(key)
            mapping[key] = mapping[key] + suffix
            self.storage.persist(mapping)
        logger.debug("appended %d chars to %r", len(suffix), key)

    def list_keys(self, pattern: str) -> List[str]:
        """Return keys in which `pattern` occurs anywhere (re.search semantics)."""
        try:
            regex = re.compile(pattern)
        except re.error as e:
            raise InvalidPattern(pattern, str(e)) from e
        return [k for k in self.storage.load() if regex.search(k)]

    def clear(self) -> None:
        with self.storage.lock():
            self.storage.reset()
        logger.debug("cleared %r", self.storage)
