from __future__ import annotations

import math

from file_manager.dto.classified_metadata import ClassifiedMetadata
from file_manager.dto.file_types import FileCategory, FileType, SizeCategory
from file_manager.utils.utils import utc_now_iso

SMALL_FILE_THRESHOLD = 1024 * 1024
LARGE_FILE_THRESHOLD = 10 * 1024 * 1024

BYTES_PER_PDF_PAGE = 50000
BYTES_PER_TEXT_LINE = 50

TEXT_EXTENSIONS = frozenset({"txt", "md", "csv", "json", "xml", "html", "css", "js", "ts"})
VIDEO_EXTENSIONS = frozenset({"mp4", "avi", "mov", "wmv", "flv", "webm", "mkv"})
AUDIO_EXTENSIONS = frozenset({"mp3", "wav", "flac", "aac", "ogg", "m4a"})
ARCHIVE_EXTENSIONS = frozenset({"zip", "rar", "7z", "tar", "gz"})

OFFICE_FORMATS: dict[str, str] = {
    "doc": "Word Document",
    "docx": "Word Document",
    "xls": "Excel Spreadsheet",
    "xlsx": "Excel Spreadsheet",
    "ppt": "PowerPoint Presentation",
    "pptx": "PowerPoint Presentation",
}

# content type substring -> label, first match wins
IMAGE_FORMATS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("jpeg", "jpg"), "JPEG"),
    (("png",), "PNG"),
    (("gif",), "GIF"),
    (("webp",), "WebP"),
    (("svg",), "SVG"),
)


def file_extension(file_name: str) -> str:
    _, dot, extension = file_name.rpartition(".")
    return extension.lower() if dot else ""


def size_category(file_size: int) -> SizeCategory:
    if file_size < SMALL_FILE_THRESHOLD:
        return SizeCategory.SMALL
    if file_size < LARGE_FILE_THRESHOLD:
        return SizeCategory.MEDIUM
    return SizeCategory.LARGE


def _image_format(content_type: str) -> str | None:
    for needles, label in IMAGE_FORMATS:
        if any(needle in content_type for needle in needles):
            return label
    return None


def _video_format(content_type: str, extension: str) -> str | None:
    if "mp4" in content_type or extension == "mp4":
        return "MP4"
    if "webm" in content_type or extension == "webm":
        return "WebM"
    if extension == "avi":
        return "AVI"
    return None


def _audio_format(content_type: str, extension: str) -> str | None:
    if "mpeg" in content_type or extension == "mp3":
        return "MP3"
    if "wav" in content_type or extension == "wav":
        return "WAV"
    if extension == "flac":
        return "FLAC"
    return None


def classify(content_type: str | None, file_name: str, file_size: int) -> ClassifiedMetadata:
    """Classify a stored object into the file type / category / size bucket taxonomy.

    The decision is made from the declared content type and the file name
    extension only; the object bytes are never read. Rules are evaluated in
    order and the first match wins: image, pdf, text, video, audio, office
    document, archive, otherwise unknown.

    Args:
        content_type: Declared content type of the object (None or invalid is treated as empty).
        file_name: Object file name, used for the extension.
        file_size: Object size in bytes.

    Returns:
        ClassifiedMetadata: Always has file_type/category/size_category set;
            format, estimated_pages and estimated_lines only where applicable.
    """
    content_type = content_type if isinstance(content_type, str) else ""
    file_size = max(0, int(file_size or 0))
    extension = file_extension(file_name or "")

    fields: dict = {
        "file_size": file_size,
        "content_type": content_type,
        "file_extension": extension,
        "processing_timestamp": utc_now_iso(),
        "file_type": FileType.UNKNOWN,
        "category": FileCategory.OTHER,
        "size_category": size_category(file_size),
    }

    if content_type.startswith("image/"):
        fields.update(file_type=FileType.IMAGE, category=FileCategory.MEDIA,
                      format=_image_format(content_type))

    elif content_type == "application/pdf" or extension == "pdf":
        fields.update(file_type=FileType.PDF, category=FileCategory.DOCUMENT,
                      estimated_pages=max(1, math.ceil(file_size / BYTES_PER_PDF_PAGE)))

    elif content_type.startswith("text/") or extension in TEXT_EXTENSIONS:
        fields.update(file_type=FileType.TEXT, category=FileCategory.DOCUMENT)
        if file_size > 0:
            fields["estimated_lines"] = max(1, math.ceil(file_size / BYTES_PER_TEXT_LINE))

    elif content_type.startswith("video/") or extension in VIDEO_EXTENSIONS:
        fields.update(file_type=FileType.VIDEO, category=FileCategory.MEDIA,
                      format=_video_format(content_type, extension))

    elif content_type.startswith("audio/") or extension in AUDIO_EXTENSIONS:
        fields.update(file_type=FileType.AUDIO, category=FileCategory.MEDIA,
                      format=_audio_format(content_type, extension))

    elif extension in OFFICE_FORMATS:
        fields.update(file_type=FileType.DOCUMENT, category=FileCategory.DOCUMENT,
                      format=OFFICE_FORMATS[extension])

    elif extension in ARCHIVE_EXTENSIONS:
        fields.update(file_type=FileType.ARCHIVE, category=FileCategory.COMPRESSED,
                      format=extension.upper())

    return ClassifiedMetadata(**fields)
