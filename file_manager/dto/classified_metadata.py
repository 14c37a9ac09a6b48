from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from file_manager.dto.file_types import FileCategory, FileType, SizeCategory

EXTRACTED_PREFIX = "extracted_"


class ClassifiedMetadata(BaseModel):
    """Coarse metadata derived from a stored object's attributes."""

    model_config = ConfigDict(frozen=True)

    file_size: int = Field(..., ge=0, description="Object size in bytes.")
    content_type: str = Field("", description="Declared content type, empty if absent.")
    file_extension: str = Field("", description="Lower-case extension without the leading dot.")
    processing_timestamp: str = Field(..., description="ISO-8601 time of classification.")
    file_type: FileType = Field(FileType.UNKNOWN)
    category: FileCategory = Field(FileCategory.OTHER)
    size_category: SizeCategory = Field(...)
    format: str | None = Field(default=None, description="Human readable format label.")
    estimated_pages: int | None = Field(default=None, description="PDF only.")
    estimated_lines: int | None = Field(default=None, description="Text only.")

    def flatten(self, prefix: str = EXTRACTED_PREFIX) -> dict[str, Any]:
        """Set fields as a flat mapping with prefixed keys, ready to merge into a file record."""
        return {prefix + key: value for key, value in self.model_dump(mode="json", exclude_none=True).items()}
