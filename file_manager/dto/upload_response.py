from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    """Response payload for /api/upload."""

    file_id: str = Field(..., description="Generated file id.")
    message: str = Field(..., description="Status message.")
    s3_key: str = Field(..., description="Storage key of the uploaded object.")
    file_name: str = Field(..., description="Stored file name.")
    file_size: int = Field(..., description="File size in bytes.")
    metadata_fields_stored: int = Field(..., description="Number of accepted client metadata fields.")
