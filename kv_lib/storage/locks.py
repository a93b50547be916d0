"""Advisory file locking around a load -> persist window."""
from __future__ import annotations
import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from kv_lib.errors import StorageIOError

logger = logging.getLogger(__name__)

try:
    import fcntl
except ImportError:  # pragma: no cover - non-POSIX platforms
    fcntl = None  # type: ignore[assignment]


def lock_path_for(path: Path) -> Path:
    return path.with_name(path.name + ".lock")


@contextmanager
def file_lock(path: str | Path) -> Iterator[None]:
    """Hold an exclusive advisory lock on `<path>.lock` for the block.

    The lock file is left in place; removing it would let a waiting process
    lock a different inode than a newcomer. Where `fcntl` is unavailable the
    block runs unlocked.
    """
    lock_path = lock_path_for(Path(path))
    try:
        lock_path.parent.mkdir(parents=True, exist_ok=True)
        f = open(lock_path, "a+")
    except OSError as e:
        raise StorageIOError(f"An error occurred {e}") from e
    if fcntl is not None:
        try:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
        except OSError as e:
            f.close()
            raise StorageIOError(f"An error occurred {e}") from e
        logger.debug("Acquired lock %s (pid %d)", lock_path, os.getpid())
    try:
        yield
    finally:
        if fcntl is not None:
            fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        f.close()
