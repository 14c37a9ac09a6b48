from pydantic import BaseModel, Field

from file_manager.dto.file_record import FileListItem


class ListFilesResponse(BaseModel):
    """Response payload for /api/files."""

    files: list[FileListItem] = Field(default_factory=list, description="Files on this page, newest first.")
    total_count: int = Field(..., description="Number of files on this page.")
    next_key: str | None = Field(default=None, description="Opaque key for the next page, if any.")
