from __future__ import annotations

from enum import Enum
from typing import Any


class _CoercibleEnum(str, Enum):
    """String enum that maps unrecognized stored values to a default member."""

    @classmethod
    def default(cls) -> "_CoercibleEnum":
        raise NotImplementedError

    @classmethod
    def coerce(cls, value: Any):
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.default()


class FileStatus(_CoercibleEnum):
    UPLOADED = "uploaded"
    PROCESSING = "processing"
    PROCESSED = "processed"
    ERROR = "error"

    @classmethod
    def default(cls) -> "FileStatus":
        return cls.UPLOADED


class FileType(_CoercibleEnum):
    PDF = "pdf"
    IMAGE = "image"
    TEXT = "text"
    VIDEO = "video"
    AUDIO = "audio"
    DOCUMENT = "document"
    ARCHIVE = "archive"
    UNKNOWN = "unknown"

    @classmethod
    def default(cls) -> "FileType":
        return cls.UNKNOWN


class FileCategory(_CoercibleEnum):
    DOCUMENT = "document"
    MEDIA = "media"
    COMPRESSED = "compressed"
    TEXT = "text"
    OTHER = "other"

    @classmethod
    def default(cls) -> "FileCategory":
        return cls.OTHER


class SizeCategory(_CoercibleEnum):
    SMALL = "small"     # < 1MB
    MEDIUM = "medium"   # 1MB - 10MB
    LARGE = "large"     # >= 10MB

    @classmethod
    def default(cls) -> "SizeCategory":
        return cls.SMALL
