from file_manager.settings import settings

bind = f"0.0.0.0:{settings.FILE_MANAGER_PORT}"
workers = settings.FILE_MANAGER_WEB_SERVICE_WORKERS
worker_class = "sync"
timeout = settings.FILE_MANAGER_WEB_SERVICE_TIMEOUT
accesslog = "-"
errorlog = "-"
loglevel = "debug" if settings.DEBUG_MODE else "info"
