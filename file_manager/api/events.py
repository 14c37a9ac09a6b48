from fastapi import APIRouter, Depends
from fastapi.responses import ORJSONResponse

from file_manager.api.dependencies import get_processor
from file_manager.dto.storage_event import StorageEvent
from file_manager.processor.processor import Processor

events_api = APIRouter(prefix="/api/events", tags=["events"])


@events_api.post("/object-created", response_class=ORJSONResponse)
def object_created(event: StorageEvent, processor: Processor = Depends(get_processor)) -> ORJSONResponse:
    processed = processor.handle_storage_event(event)
    return ORJSONResponse(content={"message": "Files processed successfully",
                                  "records": len(event.records),
                                  "processed": processed})
