import os
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=None, extra="ignore", validate_assignment=True)

    FILE_MANAGER_VERSION: str = Field(
        "dev",
        min_length=1,
        validation_alias=AliasChoices("FILE_MANAGER_VERSION", "FILE_MANAGER_IMAGE_RELEASE_VERSION"),
    )
    FILE_MANAGER_LOG_LEVEL: int = Field(20, ge=0, le=50)
    FILE_MANAGER_DEBUG_MODE: bool = Field(False)
    FILE_MANAGER_PORT: int = Field(8080, ge=1, le=65535)

    FILE_MANAGER_STORAGE_BACKEND: Literal["local", "s3"] = Field("local")
    FILE_MANAGER_STORAGE_ROOT: str | None = None
    FILE_MANAGER_METADATA_DB_PATH: str | None = None

    FILE_MANAGER_S3_BUCKET_NAME: str | None = Field(
        None,
        validation_alias=AliasChoices("FILE_MANAGER_S3_BUCKET_NAME", "S3_BUCKET_NAME"),
    )
    FILE_MANAGER_S3_REGION: str | None = Field(
        None,
        validation_alias=AliasChoices("FILE_MANAGER_S3_REGION", "AWS_REGION"),
    )
    FILE_MANAGER_S3_ENDPOINT_URL: str | None = None

    # 10 MiB
    FILE_MANAGER_MAX_FILE_SIZE: int = Field(10 * 1024 * 1024, gt=0)
    FILE_MANAGER_MAX_METADATA_FIELDS: int = Field(50, ge=1)
    FILE_MANAGER_LIST_PAGE_LIMIT: int = Field(100, ge=1)

    # classify stored objects right after upload, in place of an external storage event
    FILE_MANAGER_PROCESS_ON_UPLOAD: bool = Field(True)

    FILE_MANAGER_WEB_SERVICE_WORKERS: int = Field(1, ge=1)
    FILE_MANAGER_WEB_SERVICE_TIMEOUT: int = Field(60, gt=0)

    @field_validator("FILE_MANAGER_STORAGE_BACKEND", mode="before")
    @classmethod
    def normalize_storage_backend(cls, value: str) -> str:
        return str(value).strip().lower()

    @field_validator("FILE_MANAGER_S3_BUCKET_NAME")
    @classmethod
    def blank_bucket_is_none(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    def require_s3_bucket(self) -> str:
        if not self.FILE_MANAGER_S3_BUCKET_NAME:
            raise ValueError("FILE_MANAGER_S3_BUCKET_NAME is required when FILE_MANAGER_STORAGE_BACKEND=s3")
        return self.FILE_MANAGER_S3_BUCKET_NAME

    @computed_field  # type: ignore[prop-decorator]
    @property
    def LOG_LEVEL(self) -> int:
        # 50 - CRITICAL, 40 - ERROR, 30 - WARNING, 20 - INFO, 10 - DEBUG, 0 - NOTSET
        return self.FILE_MANAGER_LOG_LEVEL

    @computed_field  # type: ignore[prop-decorator]
    @property
    def DEBUG_MODE(self) -> bool:
        return self.FILE_MANAGER_DEBUG_MODE

    @computed_field  # type: ignore[prop-decorator]
    @property
    def ROOT_DIR(self) -> str:
        return str(Path(__file__).resolve().parents[1])

    @computed_field  # type: ignore[prop-decorator]
    @property
    def DATA_DIR(self) -> str:
        return os.path.join(self.ROOT_DIR, "data")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def STORAGE_BACKEND(self) -> str:
        return self.FILE_MANAGER_STORAGE_BACKEND

    @computed_field  # type: ignore[prop-decorator]
    @property
    def STORAGE_ROOT(self) -> str:
        return self.FILE_MANAGER_STORAGE_ROOT or os.path.join(self.DATA_DIR, "objects")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def METADATA_DB_PATH(self) -> str:
        return self.FILE_MANAGER_METADATA_DB_PATH or os.path.join(self.DATA_DIR, "file_metadata.json")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def MAX_FILE_SIZE(self) -> int:
        return self.FILE_MANAGER_MAX_FILE_SIZE

    @computed_field  # type: ignore[prop-decorator]
    @property
    def MAX_METADATA_FIELDS(self) -> int:
        return self.FILE_MANAGER_MAX_METADATA_FIELDS

    @computed_field  # type: ignore[prop-decorator]
    @property
    def LIST_PAGE_LIMIT(self) -> int:
        return self.FILE_MANAGER_LIST_PAGE_LIMIT

    @computed_field  # type: ignore[prop-decorator]
    @property
    def PROCESS_ON_UPLOAD(self) -> bool:
        return self.FILE_MANAGER_PROCESS_ON_UPLOAD

settings = Settings() # type: ignore[call-arg]
