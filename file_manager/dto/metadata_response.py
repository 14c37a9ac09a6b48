from pydantic import BaseModel, Field

from file_manager.dto.file_record import FileRecord


class MetadataResponse(BaseModel):
    """Response payload for /api/metadata/{file_id}."""

    file_id: str = Field(..., description="Requested file id.")
    metadata: FileRecord = Field(..., description="Stored file record, including extracted fields.")
