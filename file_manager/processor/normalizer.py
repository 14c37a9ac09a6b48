from __future__ import annotations

import math
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import NamedTuple, Union

from file_manager.processor.multipart import RawPart

FILE_FIELD_NAME = "file"
DEFAULT_FILE_NAME = "unnamed_file"
DEFAULT_CONTENT_TYPE = "application/octet-stream"
MAX_METADATA_FIELDS = 50

# integers outside the signed 64-bit range are stored as floats
MAX_INT_VALUE = 2 ** 63 - 1
_MAX_INT_DIGITS = len(str(MAX_INT_VALUE))

MetadataValue = Union[str, int, float, bool]

_NUMERIC_VALUE = re.compile(r"[0-9]+(\.[0-9]+)?")
_INVALID_KEY_CHARS = re.compile(r"[^a-zA-Z0-9_]")


@dataclass(frozen=True, slots=True)
class FilePart:
    """The uploaded file, with defaults applied to the optional part headers."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


class NormalizedUpload(NamedTuple):
    file: FilePart | None
    metadata: dict[str, MetadataValue]
    errors: list[str]


def sanitize_key(key: str) -> str:
    return _INVALID_KEY_CHARS.sub("_", key).lower()


def coerce_value(text: str) -> MetadataValue:
    """Infer a scalar from trimmed form text: number, then boolean, then string."""
    if _NUMERIC_VALUE.fullmatch(text):
        if "." not in text and len(text) <= _MAX_INT_DIGITS and int(text) <= MAX_INT_VALUE:
            return int(text)
        return float(text)

    lowered = text.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False

    return text


def _validate_value(key: str, value: MetadataValue) -> str | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return f'Invalid number value for key: "{key}" - must be a finite number'
        return None
    if not value.strip():
        return f'Empty string value for key: "{key}"'
    return None


def to_file_part(part: RawPart) -> FilePart:
    return FilePart(
        filename=part.filename or DEFAULT_FILE_NAME,
        content_type=part.content_type or DEFAULT_CONTENT_TYPE,
        data=part.data,
    )


def normalize(parts: Iterable[RawPart], max_fields: int = MAX_METADATA_FIELDS) -> NormalizedUpload:
    """Split decoded parts into the file payload and the typed client metadata.

    Multiple `file` parts: the last one wins. Metadata keys are sanitized to
    `[a-z0-9_]`; when two keys collide the last value wins and the first
    position is kept.

    Args:
        parts: Decoded multipart sections, in request order.
        max_fields: Maximum number of accepted metadata fields.

    Returns:
        NormalizedUpload: the file part (or None), the accepted metadata and the
            validation errors. The metadata is only valid if errors is empty.
    """
    file_part: FilePart | None = None
    metadata: dict[str, MetadataValue] = {}
    errors: list[str] = []

    for part in parts:
        if part.name == FILE_FIELD_NAME:
            file_part = to_file_part(part)
            continue

        if not part.name or not part.data:
            continue

        if not part.name.strip():
            errors.append(f'Invalid key: "{part.name}" - keys must be non-empty strings')
            continue

        value = coerce_value(part.data.decode("utf-8", errors="replace").strip())
        error = _validate_value(part.name, value)
        if error is not None:
            errors.append(error)
            continue

        metadata[sanitize_key(part.name)] = value

    if len(metadata) > max_fields:
        errors.append(f"Too many metadata fields - maximum {max_fields} allowed")

    return NormalizedUpload(file=file_part, metadata=metadata, errors=errors)
