from fastapi import APIRouter

from file_manager.api.events import events_api
from file_manager.api.files import files_api
from file_manager.api.health import health_api

api = APIRouter()

api.include_router(health_api)
api.include_router(files_api)
api.include_router(events_api)
