"""Simple memory-backed storage backend

This backend keeps a copy of the mapping in process memory. Nothing is
written to disk; it is used for tests and dry runs.
"""
from threading import RLock
from typing import ContextManager, Dict, Mapping, Optional


class MemoryBackendStorage:
    name = "memory"

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self._lock = RLock()
        self._store: Dict[str, str] = dict(initial or {})

    def load(self) -> Dict[str, str]:
        with self._lock:
            # hand out a copy so callers cannot mutate stored state in place
            return dict(self._store)

    def persist(self, mapping: Mapping[str, str]) -> None:
        with self._lock:
            self._store = dict(mapping)

    def reset(self) -> None:
        with self._lock:
            self._store = {}

    def lock(self) -> ContextManager:
        return self._lock
