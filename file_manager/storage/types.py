from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

UPLOAD_PREFIX = "uploads/"


class StorageBackend(str, Enum):
    LOCAL = "local"
    S3 = "s3"


@dataclass(frozen=True)
class StoredObject:
    key: str
    size: int
    content_type: str | None
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class UploadKey:
    """Parsed `uploads/{file_id}/{file_name...}` storage key."""

    file_id: str
    file_name: str

    @property
    def key(self) -> str:
        return f"{UPLOAD_PREFIX}{self.file_id}/{self.file_name}"

    @classmethod
    def parse(cls, key: str) -> "UploadKey | None":
        parts = key.split("/")
        if len(parts) < 3 or f"{parts[0]}/" != UPLOAD_PREFIX or not parts[1]:
            return None
        file_name = "/".join(parts[2:])
        if not file_name:
            return None
        return cls(file_id=parts[1], file_name=file_name)
