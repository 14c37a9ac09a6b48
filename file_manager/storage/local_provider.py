from __future__ import annotations

from pathlib import Path

import orjson

from file_manager.storage.types import StorageBackend, StoredObject
from file_manager.utils.utils import detect_content_type

OBJECT_META_DIR = ".objmeta"
SNIFF_BYTES = 8192


class LocalStorageProvider:
    """Object store on the local filesystem.

    Object attributes (content type, user metadata) live in a JSON sidecar
    under `<root>/.objmeta/<key>.json`.
    """

    backend_name = StorageBackend.LOCAL.value

    def __init__(self, root_dir: str) -> None:
        self._root = Path(root_dir).resolve()
        self._root.mkdir(parents=True, exist_ok=True)

    def _object_path(self, key: str) -> Path:
        path = (self._root / key).resolve()
        if not path.is_relative_to(self._root) or path == self._root:
            raise ValueError(f"object key escapes the storage root: {key}")
        return path

    def _meta_path(self, key: str) -> Path:
        self._object_path(key)
        return self._root / OBJECT_META_DIR / f"{key}.json"

    def put_object(
        self,
        *,
        key: str,
        payload: bytes,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> StoredObject:
        file_path = self._object_path(key)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(payload)

        meta_path = self._meta_path(key)
        meta_path.parent.mkdir(parents=True, exist_ok=True)
        meta_path.write_bytes(orjson.dumps({"content_type": content_type, "metadata": metadata or {}}))

        return StoredObject(key=key, size=len(payload), content_type=content_type, metadata=dict(metadata or {}))

    def head_object(self, *, key: str) -> StoredObject | None:
        file_path = self._object_path(key)
        if not file_path.is_file():
            return None

        content_type: str | None = None
        metadata: dict[str, str] = {}
        meta_path = self._meta_path(key)
        if meta_path.is_file():
            attributes = orjson.loads(meta_path.read_bytes())
            content_type = attributes.get("content_type")
            metadata = attributes.get("metadata") or {}
        else:
            with open(file_path, mode="rb") as f:
                content_type = detect_content_type(f.read(SNIFF_BYTES))

        return StoredObject(key=key, size=file_path.stat().st_size, content_type=content_type, metadata=metadata)

    def read_bytes(self, *, key: str) -> bytes:
        return self._object_path(key).read_bytes()
