from __future__ import annotations

from typing import Any, Protocol

from file_manager.storage.types import StoredObject


class ObjectStore(Protocol):
    backend_name: str

    def put_object(
        self,
        *,
        key: str,
        payload: bytes,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> StoredObject:
        ...

    def head_object(self, *, key: str) -> StoredObject | None:
        ...

    def read_bytes(self, *, key: str) -> bytes:
        ...


class MetadataStore(Protocol):

    def put(self, record: dict[str, Any]) -> None:
        ...

    def get(self, file_id: str) -> dict[str, Any] | None:
        ...

    def scan(self) -> list[dict[str, Any]]:
        ...

    def update(self, file_id: str, fields: dict[str, Any]) -> bool:
        """Merge `fields` into an existing record; False when the record does not exist."""
        ...
