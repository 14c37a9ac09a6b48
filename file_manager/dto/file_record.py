from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from file_manager.dto.file_types import FileStatus

ClientMetadata = dict[str, Union[bool, int, float, str]]


class FileRecord(BaseModel):
    """Persisted metadata record of one uploaded file.

    Extracted fields (`extracted_*`), `processing_date` and anything else
    merged later are kept as extra attributes.
    """

    model_config = ConfigDict(extra="allow")

    file_id: str
    file_name: str
    content_type: str
    s3_key: str
    upload_date: str
    file_size: int = Field(..., ge=0)
    status: FileStatus = FileStatus.UPLOADED
    client_metadata: ClientMetadata = Field(default_factory=dict)

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, value: Any) -> FileStatus:
        return FileStatus.coerce(value)


class FileListItem(BaseModel):
    file_id: str
    file_name: str
    upload_date: str
    file_size: int
    status: FileStatus
    content_type: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, value: Any) -> FileStatus:
        return FileStatus.coerce(value)
