"""Binary-safe `multipart/form-data` body decoder.

The decoder works on the raw request bytes so file payloads are never
re-encoded. It is deliberately lenient: a section that cannot be parsed
(no header/body separator, no field name) is dropped instead of failing
the whole request.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from file_manager.processor.exceptions import MalformedRequest

CRLF = b"\r\n"
HEADER_SEPARATOR = b"\r\n\r\n"
MULTIPART_FORM_DATA = "multipart/form-data"

_BOUNDARY_PARAM = re.compile(r"boundary=([^;]+)", re.IGNORECASE)

_DISPOSITION_QUOTED = re.compile(
    r'Content-Disposition:\s*form-data;\s*name="([^"]+)"(?:;\s*filename="([^"]+)")?',
    re.IGNORECASE,
)
_DISPOSITION_UNQUOTED = re.compile(
    r"Content-Disposition:\s*form-data;\s*name=([^;,\s]+)(?:;\s*filename=([^;,\s]+))?",
    re.IGNORECASE,
)
_NAME_PARAM = re.compile(r'\bname=(?:"([^"]+)"|([^;,\s"]+))', re.IGNORECASE)
_FILENAME_PARAM = re.compile(r'\bfilename=(?:"([^"]+)"|([^;,\s"]+))', re.IGNORECASE)
_CONTENT_TYPE_HEADER = re.compile(r"Content-Type:\s*([^\r\n]+)", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class RawPart:
    """One section of a multipart body."""

    name: str
    data: bytes
    filename: str | None = None
    content_type: str | None = None


Disposition = tuple[str, str | None]


def extract_boundary(content_type: str | None) -> str:
    """Return the boundary token declared by a `Content-Type` header.

    Args:
        content_type: Raw `Content-Type` header value.

    Raises:
        MalformedRequest: header missing, not `multipart/form-data`, or without a boundary.

    Returns:
        str: Boundary token, without surrounding quotes.
    """
    if not content_type or MULTIPART_FORM_DATA not in content_type.lower():
        raise MalformedRequest(details=["Content-Type must be multipart/form-data"])

    match = _BOUNDARY_PARAM.search(content_type)
    boundary = match.group(1).strip().strip('"') if match else ""
    if not boundary:
        raise MalformedRequest(details=["No boundary found in Content-Type header"])

    return boundary


def _quoted_disposition(headers: str) -> Disposition | None:
    match = _DISPOSITION_QUOTED.search(headers)
    if match is None:
        return None
    # a quoted name with an unquoted filename belongs to the mixed form
    if match.group(2) is None and _FILENAME_PARAM.search(headers):
        return None
    return match.group(1), match.group(2)


def _unquoted_disposition(headers: str) -> Disposition | None:
    match = _DISPOSITION_UNQUOTED.search(headers)
    if match is None:
        return None
    # a quoted filename after an unquoted name belongs to the mixed form
    if match.group(2) is None and _FILENAME_PARAM.search(headers):
        return None
    if match.group(1).startswith('"'):
        return None
    if match.group(2) is not None and match.group(2).startswith('"'):
        return None
    filename = match.group(2).replace('"', "") if match.group(2) else None
    return match.group(1).replace('"', ""), filename


def _mixed_disposition(headers: str) -> Disposition | None:
    name_match = _NAME_PARAM.search(headers)
    if name_match is None:
        return None
    filename_match = _FILENAME_PARAM.search(headers)
    filename = (filename_match.group(1) or filename_match.group(2)) if filename_match else None
    return name_match.group(1) or name_match.group(2), filename


DISPOSITION_PARSERS: tuple[Callable[[str], Disposition | None], ...] = (
    _quoted_disposition,
    _unquoted_disposition,
    _mixed_disposition,
)


def parse_disposition(headers: str) -> Disposition | None:
    """Extract `(name, filename)` from a part's header block, trying each known syntax in order."""
    for parser in DISPOSITION_PARSERS:
        disposition = parser(headers)
        if disposition is not None:
            return disposition
    return None


def parse_part(section: bytes) -> RawPart | None:
    """Parse the bytes between two delimiters into a `RawPart`, or None if unusable."""
    header_end = section.find(HEADER_SEPARATOR)
    if header_end == -1:
        return None

    headers = section[:header_end].decode("utf-8", errors="replace")
    data = section[header_end + len(HEADER_SEPARATOR):]
    if data.endswith(CRLF):
        data = data[:-len(CRLF)]

    disposition = parse_disposition(headers)
    if disposition is None:
        return None

    name, filename = disposition
    name = name.strip()
    if not name:
        return None

    content_type_match = _CONTENT_TYPE_HEADER.search(headers)
    content_type = content_type_match.group(1).strip() if content_type_match else None

    return RawPart(
        name=name,
        data=data,
        filename=filename.strip() if filename else None,
        content_type=content_type or None,
    )


def decode(body: bytes, boundary: str) -> list[RawPart]:
    """Split a multipart body into its parts, in order.

    Args:
        body: Raw request body.
        boundary: Boundary token from the `Content-Type` header.

    Returns:
        list[RawPart]: Successfully parsed parts. The preamble, a trailing
            unterminated section and malformed sections are dropped.
    """
    delimiter = b"--" + boundary.encode("utf-8")
    parts: list[RawPart] = []

    position = body.find(delimiter)
    while position != -1:
        start = position + len(delimiter)

        # closing delimiter: `--boundary--`
        if body.startswith(b"--", start):
            break

        position = body.find(delimiter, start)
        if position == -1:
            break

        part = parse_part(body[start:position])
        if part is not None:
            parts.append(part)

    return parts
