"""
This file is used to create a FastAPI application that will be served by a ASGI server
"""
import uvicorn

from file_manager.app import create_app
from file_manager.settings import settings

app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=settings.FILE_MANAGER_PORT, reload=False)
