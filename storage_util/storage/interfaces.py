from typing import Protocol, Any, Optional, runtime_checkable

from storage_util.identification import IdentificationInfo


@runtime_checkable
class StorageProtocol(Protocol):
    """Storage backend protocol mirroring `storage_util.storage.StorageBackend`.

    Implementations should follow the semantics documented on the abstract
    base class in `storage_util.storage.base` (None for missing keys,
    StorageError for failures, thread-safety where required).
    """

    key_prefix: str
    identification_info: IdentificationInfo

    def save(self, key: str, value: Any) -> Optional[Any]: ...

    def load(self, key: str, value_type: Optional[type] = None) -> Optional[Any]: ...

    def delete(self, key: str, value_type: Optional[type] = None) -> Optional[Any]: ...
