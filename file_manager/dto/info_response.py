from pydantic import BaseModel, Field


class InfoResponse(BaseModel):
    """Response payload for the /api/info endpoint."""

    service_app_name: str = Field(..., description="Service name.")
    service_version: str = Field(..., description="Service version string.")
    storage_backend: str = Field(..., description="Object store backend in use.")
    max_file_size: int = Field(..., description="Maximum accepted upload size in bytes.")
