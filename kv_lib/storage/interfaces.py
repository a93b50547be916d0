from typing import Protocol, Dict, Mapping, ContextManager, runtime_checkable


@runtime_checkable
class StorageProtocol(Protocol):
    """Storage backend protocol mirroring `kv_lib.storage.BackendStorage`.

    Implementations should follow the semantics documented on the abstract
    base class in `kv_lib.storage.base` (empty mapping for missing storage,
    typed errors for undecodable content, etc.).
    """

    name: str

    def load(self) -> Dict[str, str]: ...

    def persist(self, mapping: Mapping[str, str]) -> None: ...

    def reset(self) -> None: ...

    def lock(self) -> ContextManager: ...
