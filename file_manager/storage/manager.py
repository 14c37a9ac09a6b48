from __future__ import annotations

from file_manager.settings import Settings, settings as default_settings
from file_manager.storage.local_provider import LocalStorageProvider
from file_manager.storage.metadata_store import JsonFileMetadataStore
from file_manager.storage.provider import MetadataStore, ObjectStore
from file_manager.storage.s3_provider import S3StorageProvider
from file_manager.storage.types import StorageBackend


def create_object_store(settings: Settings = default_settings) -> ObjectStore:
    if settings.STORAGE_BACKEND == StorageBackend.S3.value:
        return S3StorageProvider(
            bucket_name=settings.require_s3_bucket(),
            region=settings.FILE_MANAGER_S3_REGION,
            endpoint_url=settings.FILE_MANAGER_S3_ENDPOINT_URL,
        )

    return LocalStorageProvider(root_dir=settings.STORAGE_ROOT)


def create_metadata_store(settings: Settings = default_settings) -> MetadataStore:
    return JsonFileMetadataStore(path=settings.METADATA_DB_PATH)
