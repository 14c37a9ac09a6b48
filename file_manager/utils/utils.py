"""Utility helpers for the file manager service.

Shared behaviors across the API and processor layers: application info,
error response shaping, timestamps, content sniffing and logging setup.
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any

import filetype

from file_manager.settings import settings


def get_app_info() -> dict:
    """Return general information about the application.

    Used by the `/api/info` endpoint.

    Returns:
        dict: Application information (name, version, storage backend, limits).
    """
    return {"service_app_name": "file-manager",
            "service_version": settings.FILE_MANAGER_VERSION,
            "storage_backend": settings.STORAGE_BACKEND,
            "max_file_size": settings.MAX_FILE_SIZE}


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with a `Z` suffix and millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def parse_iso_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp, falling back to the epoch for missing or invalid values.

    Args:
        value: Stored timestamp, usually a string produced by `utc_now_iso`.

    Returns:
        datetime: Timezone-aware datetime.
    """
    if isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            parsed = None
        if parsed is not None:
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return datetime.fromtimestamp(0, tz=timezone.utc)


def bytes_to_mb(size: int) -> float:
    return round(size / 1024 / 1024 * 100) / 100


def build_error_response(
    error: str,
    details: list[str] | None = None,
    extra: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a standard API error payload.

    Args:
        error: Short human readable error message.
        details: Optional list of detail messages (omitted when empty).
        extra: Optional additional top-level fields.

    Returns:
        dict[str, Any]: Error body with `error`, `timestamp` and optional `details`.
    """
    body: dict[str, Any] = {
        "error": error,
        "timestamp": utc_now_iso(),
    }

    if details:
        body["details"] = list(details)

    if extra:
        body.update(extra)

    return body


def detect_content_type(stream: bytes) -> str | None:
    """Best-effort mime detection using the `filetype` library.

    Args:
        stream: Raw bytes (or the head of them) to inspect.

    Returns:
        str | None: Detected mime type or None if unknown.
    """
    try:
        return filetype.guess_mime(stream)
    except Exception:
        logging.error("Could not determine file type")
    return None


def setup_logging(component_name: str = "config_logger", log_level: int = 20) -> logging.Logger:
    """Configure a logger that writes to stdout with a consistent format.

    Args:
        component_name: Logger name to configure.
        log_level: Logging level to set on the logger and handler.

    Returns:
        logging.Logger: Configured logger instance.
    """
    root_logger = logging.getLogger(component_name)
    log_format = '[%(asctime)s] [%(levelname)s] %(name)s: %(message)s'
    log_handler = logging.StreamHandler(sys.stdout)
    log_handler.setFormatter(logging.Formatter(fmt=log_format))
    log_handler.setLevel(level=log_level)
    root_logger.setLevel(level=log_level)
    root_logger.propagate = False

    # only add the handler if a previous one does not exists
    handler_exists = False
    for h in root_logger.handlers:
        if isinstance(h, logging.StreamHandler) and h.level == log_handler.level:
            handler_exists = True
            break

    if not handler_exists:
        root_logger.addHandler(log_handler)

    return root_logger
