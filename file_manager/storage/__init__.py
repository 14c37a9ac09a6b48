from file_manager.storage.manager import create_metadata_store, create_object_store
from file_manager.storage.provider import MetadataStore, ObjectStore
from file_manager.storage.types import StorageBackend, StoredObject, UploadKey

__all__ = [
    "MetadataStore",
    "ObjectStore",
    "StorageBackend",
    "StoredObject",
    "UploadKey",
    "create_metadata_store",
    "create_object_store",
]
