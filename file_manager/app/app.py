import traceback

from fastapi import FastAPI, Request
from fastapi.responses import ORJSONResponse

from file_manager.api import api
from file_manager.processor.exceptions import FileManagerError
from file_manager.processor.processor import Processor
from file_manager.settings import settings
from file_manager.utils.utils import build_error_response, setup_logging

log = setup_logging(component_name="app", log_level=settings.LOG_LEVEL)


async def file_manager_error_handler(request: Request, exc: FileManagerError) -> ORJSONResponse:
    return ORJSONResponse(
        status_code=exc.status_code,
        content=build_error_response(exc.message, details=exc.details, extra=exc.extra),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> ORJSONResponse:
    log.error("Unhandled error on " + request.method + " " + request.url.path + ": " + str(traceback.format_exc()))
    return ORJSONResponse(
        status_code=500,
        content=build_error_response("Internal server error", details=[str(exc)]),
    )


def create_app(processor: Processor | None = None) -> FastAPI:
    """
        :description: Creates FastAPI application with the API router and the file processor
        :param processor: optional pre-built processor (custom stores), built from settings if omitted
        :return: FastAPI application instance
    """

    app = FastAPI(title="File Manager Service",
                  description="File upload, listing and metadata extraction API",
                  version=settings.FILE_MANAGER_VERSION,
                  default_response_class=ORJSONResponse,
                  debug=settings.DEBUG_MODE)
    app.include_router(api)

    app.add_exception_handler(FileManagerError, file_manager_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.state.processor = processor if processor is not None else Processor()

    log.info("file manager started | storage backend: %s", settings.STORAGE_BACKEND)

    return app
