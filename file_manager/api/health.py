from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse

from file_manager.dto.info_response import InfoResponse
from file_manager.utils.utils import get_app_info

health_api = APIRouter(prefix="/api")


@health_api.get("/health", response_class=ORJSONResponse)
def health() -> ORJSONResponse:
    return ORJSONResponse(content={"status": "healthy"})


@health_api.get("/ready", response_class=ORJSONResponse)
def ready(request: Request) -> ORJSONResponse:
    processor = getattr(request.app.state, "processor", None)
    if processor is None:
        return ORJSONResponse(status_code=503, content={"status": "not_ready", "issues": ["processor_not_initialized"]})

    issues = []
    try:
        processor.metadata_store.scan()
    except OSError as exc:
        issues.append("metadata_store_unavailable: " + str(exc))

    if issues:
        return ORJSONResponse(status_code=503, content={"status": "not_ready", "issues": issues})

    return ORJSONResponse(content={"status": "ready", "storage_backend": processor.object_store.backend_name})


@health_api.get("/info", response_model=InfoResponse, response_class=ORJSONResponse)
def info() -> ORJSONResponse:
    return ORJSONResponse(content=get_app_info())
