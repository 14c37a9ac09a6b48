from __future__ import annotations

import traceback
import uuid
from typing import Any
from urllib.parse import quote, unquote, unquote_plus

import orjson

from file_manager.dto.classified_metadata import ClassifiedMetadata
from file_manager.dto.file_record import FileListItem, FileRecord
from file_manager.dto.file_types import FileStatus
from file_manager.dto.list_files_response import ListFilesResponse
from file_manager.dto.metadata_response import MetadataResponse
from file_manager.dto.storage_event import StorageEvent
from file_manager.dto.upload_response import UploadResponse
from file_manager.processor.classifier import classify
from file_manager.processor.exceptions import FileNotFound, FileTooLarge, InvalidMetadata, NoFileProvided
from file_manager.processor.multipart import decode, extract_boundary
from file_manager.processor.normalizer import DEFAULT_FILE_NAME, normalize
from file_manager.settings import settings
from file_manager.storage import MetadataStore, ObjectStore, UploadKey, create_metadata_store, create_object_store
from file_manager.utils.utils import bytes_to_mb, parse_iso_timestamp, setup_logging, utc_now_iso


def storage_file_name(file_name: str) -> str:
    """Last path component of a client supplied file name."""
    name = file_name.replace("\\", "/").rsplit("/", 1)[-1].strip()
    if name in ("", ".", ".."):
        return DEFAULT_FILE_NAME
    return name


class Processor:

    def __init__(
        self,
        object_store: ObjectStore | None = None,
        metadata_store: MetadataStore | None = None,
        max_file_size: int | None = None,
        max_metadata_fields: int | None = None,
        list_page_limit: int | None = None,
    ) -> None:
        self.log = setup_logging(component_name="processor", log_level=settings.LOG_LEVEL)
        self.log.debug("log level set to : " + str(settings.LOG_LEVEL))

        self.object_store = object_store if object_store is not None else create_object_store()
        self.metadata_store = metadata_store if metadata_store is not None else create_metadata_store()
        self.max_file_size = max_file_size or settings.MAX_FILE_SIZE
        self.max_metadata_fields = max_metadata_fields or settings.MAX_METADATA_FIELDS
        self.list_page_limit = list_page_limit or settings.LIST_PAGE_LIMIT

    def ingest(self, body: bytes, content_type: str | None) -> UploadResponse:
        """ Decodes a multipart upload, stores the file and its initial metadata record.

        Args:
            body (bytes): raw request body (already base64-decoded if the transport required it)
            content_type (str | None): request `Content-Type` header, must carry the boundary

        Raises:
            MalformedRequest: missing/invalid Content-Type or boundary
            NoFileProvided: no part named `file`
            InvalidMetadata: one or more metadata fields were rejected
            FileTooLarge: file exceeds the configured maximum size

        Returns:
            UploadResponse: generated file id, storage key and counts
        """

        boundary = extract_boundary(content_type)
        parts = decode(body, boundary)
        self.log.debug("decoded %s multipart parts", len(parts))

        file_part, client_metadata, errors = normalize(parts, max_fields=self.max_metadata_fields)

        if file_part is None:
            self.log.warning("No file provided in request")
            raise NoFileProvided()

        if errors:
            self.log.warning("Invalid metadata format | errors: %s", errors)
            raise InvalidMetadata(details=errors)

        if file_part.size > self.max_file_size:
            self.log.warning("File too large | actual size: %s | max size: %s", file_part.size, self.max_file_size)
            raise FileTooLarge(
                details=[f"Maximum file size is {round(self.max_file_size / 1024 / 1024)}MB"],
                extra={
                    "max_size": f"{round(self.max_file_size / 1024 / 1024)}MB",
                    "actual_size": f"{bytes_to_mb(file_part.size)}MB",
                },
            )

        file_id = str(uuid.uuid4())
        file_name = storage_file_name(file_part.filename)
        s3_key = UploadKey(file_id=file_id, file_name=file_name).key
        upload_date = utc_now_iso()

        self.log.info("Processing file upload | file_id: %s | file name: %s | size: %s | content type: %s",
                      file_id, file_name, file_part.size, file_part.content_type)

        self.object_store.put_object(
            key=s3_key,
            payload=file_part.data,
            content_type=file_part.content_type,
            metadata={
                "original-name": file_name,
                "file-id": file_id,
                "upload-timestamp": upload_date,
            },
        )

        record = FileRecord(
            file_id=file_id,
            file_name=file_name,
            content_type=file_part.content_type,
            s3_key=s3_key,
            upload_date=upload_date,
            file_size=file_part.size,
            status=FileStatus.UPLOADED,
            client_metadata=client_metadata,
        )
        self.metadata_store.put(record.model_dump(mode="json"))

        self.log.info("File uploaded successfully | file_id: %s", file_id)

        return UploadResponse(
            file_id=file_id,
            message="File uploaded successfully",
            s3_key=s3_key,
            file_name=file_name,
            file_size=file_part.size,
            metadata_fields_stored=len(client_metadata),
        )

    def process_stored_object(self, object_key: str, object_size: int | None = None) -> ClassifiedMetadata | None:
        """ Classifies a newly stored object and merges the result into its file record.

        Args:
            object_key (str): storage key, expected as `uploads/{file_id}/{file_name}`
            object_size (int | None, optional): size reported by the storage event,
                the stored object size is used when absent

        Returns:
            ClassifiedMetadata | None: the merged classification, or None when the object was skipped
                or its file record does not exist
        """

        upload_key = UploadKey.parse(object_key)
        if upload_key is None:
            self.log.warning("Skipping object - not in expected format | key: %s", object_key)
            return None

        stored_object = self.object_store.head_object(key=object_key)
        if stored_object is None:
            self.log.warning("Skipping object - not found in storage | key: %s", object_key)
            return None

        file_size = object_size if object_size is not None else stored_object.size
        classified = classify(stored_object.content_type, upload_key.file_name, file_size)
        self.log.info("Extracted metadata | file_id: %s | %s", upload_key.file_id, classified.model_dump(mode="json"))

        fields: dict[str, Any] = {
            "status": FileStatus.PROCESSED.value,
            "processing_date": utc_now_iso(),
        }
        fields.update(classified.flatten())

        if not self.metadata_store.update(upload_key.file_id, fields):
            # the upload may have failed to create the initial record, do not retry
            self.log.error("File record not found - possible race condition | file_id: %s", upload_key.file_id)
            return None

        self.log.info("File processing completed successfully | file_id: %s", upload_key.file_id)
        return classified

    def handle_storage_event(self, event: StorageEvent) -> int:
        """ Runs `process_stored_object` for every record of an object-created event.
        A failing record is logged and does not stop the remaining ones.

        Returns:
            int: number of records whose classification was merged into a file record
        """

        self.log.info("File processing event received | record count: %s", len(event.records))
        processed = 0

        for record in event.records:
            object_key = unquote_plus(record.s3.object.key)
            try:
                if self.process_stored_object(object_key, record.s3.object.size) is not None:
                    processed += 1
            except Exception:
                self.log.error("Error processing object: " + object_key + " | " + str(traceback.format_exc()))

        return processed

    @staticmethod
    def _encode_page_key(file_id: str) -> str:
        return quote(orjson.dumps({"file_id": file_id}).decode("utf-8"), safe="")

    def _decode_page_key(self, last_key: str) -> str | None:
        try:
            decoded = orjson.loads(unquote(last_key))
        except orjson.JSONDecodeError:
            self.log.warning("Invalid lastKey parameter: %s", last_key)
            return None
        if not isinstance(decoded, dict) or not isinstance(decoded.get("file_id"), str):
            self.log.warning("Invalid lastKey parameter: %s", last_key)
            return None
        return decoded["file_id"]

    def list_files(self, limit: int | None = None, last_key: str | None = None) -> ListFilesResponse:
        """ Lists file records, newest upload first, one page at a time.

        Args:
            limit (int | None, optional): page size, capped at the configured page limit
            last_key (str | None, optional): `next_key` of the previous page

        Returns:
            ListFilesResponse: page of files with a `next_key` when more remain
        """

        page_size = min(limit or self.list_page_limit, self.list_page_limit)
        page_size = max(1, page_size)

        records = sorted(
            self.metadata_store.scan(),
            key=lambda item: (parse_iso_timestamp(item.get("upload_date")), str(item.get("file_id", ""))),
            reverse=True,
        )

        start = 0
        if last_key:
            last_file_id = self._decode_page_key(last_key)
            if last_file_id is not None:
                for index, item in enumerate(records):
                    if item.get("file_id") == last_file_id:
                        start = index + 1
                        break

        page = records[start:start + page_size]
        files = [FileListItem.model_validate(item) for item in page]

        next_key = None
        if start + page_size < len(records) and files:
            next_key = self._encode_page_key(files[-1].file_id)

        self.log.info("Files retrieved successfully | count: %s | has next key: %s", len(files), next_key is not None)

        return ListFilesResponse(files=files, total_count=len(files), next_key=next_key)

    def get_file_metadata(self, file_id: str) -> MetadataResponse:
        record = self.metadata_store.get(file_id)
        if record is None:
            self.log.warning("File not found | file_id: %s", file_id)
            raise FileNotFound()

        return MetadataResponse(file_id=file_id, metadata=FileRecord.model_validate(record))
