import base64
import binascii

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request
from fastapi.responses import ORJSONResponse
from starlette.concurrency import run_in_threadpool

from file_manager.api.dependencies import get_processor
from file_manager.dto.list_files_response import ListFilesResponse
from file_manager.dto.metadata_response import MetadataResponse
from file_manager.dto.upload_response import UploadResponse
from file_manager.processor.exceptions import MalformedRequest
from file_manager.processor.processor import Processor
from file_manager.settings import settings

files_api = APIRouter(prefix="/api", tags=["files"])

BODY_ENCODING_HEADER = "x-body-encoding"


def _decode_body(raw: bytes, encoding: str | None) -> bytes:
    if encoding and encoding.strip().lower() == "base64":
        try:
            return base64.b64decode(raw, validate=False)
        except (binascii.Error, ValueError) as exc:
            raise MalformedRequest(details=["Request body is not valid base64"]) from exc
    return raw


@files_api.post("/upload", response_model=UploadResponse, response_class=ORJSONResponse)
async def upload(
    request: Request,
    background_tasks: BackgroundTasks,
    processor: Processor = Depends(get_processor),
) -> ORJSONResponse:
    body = _decode_body(await request.body(), request.headers.get(BODY_ENCODING_HEADER))
    result = await run_in_threadpool(processor.ingest, body, request.headers.get("content-type"))

    if settings.PROCESS_ON_UPLOAD:
        background_tasks.add_task(processor.process_stored_object, result.s3_key, result.file_size)

    return ORJSONResponse(content=result.model_dump(mode="json"), background=background_tasks)


@files_api.get("/files", response_model=ListFilesResponse, response_class=ORJSONResponse)
def list_files(
    limit: int | None = Query(default=None, ge=1),
    last_key: str | None = Query(default=None, alias="lastKey"),
    processor: Processor = Depends(get_processor),
) -> ORJSONResponse:
    result = processor.list_files(limit=limit, last_key=last_key)
    return ORJSONResponse(content=result.model_dump(mode="json", exclude_none=True))


@files_api.get("/metadata/{file_id}", response_model=MetadataResponse, response_class=ORJSONResponse)
def file_metadata(file_id: str, processor: Processor = Depends(get_processor)) -> ORJSONResponse:
    result = processor.get_file_metadata(file_id)
    return ORJSONResponse(content=result.model_dump(mode="json"))
