import re
import traceback

from a2wsgi import ASGIMiddleware

from file_manager.app import create_app
from file_manager.settings import settings
from file_manager.utils.utils import setup_logging

log = setup_logging(component_name="wsgi", log_level=settings.LOG_LEVEL)

asgi_app = create_app()
asgi_middleware = ASGIMiddleware(asgi_app)  # type: ignore[arg-type]

# traversal, NUL bytes and common probe signatures in the request path
_BLOCKED_PATH = re.compile(r"(%2e%2e|\.\./|%00|\${jndi:|/winnt/|/etc/passwd)", re.I)


def _plain_response(start_response, status: str, message: bytes) -> list[bytes]:
    start_response(status, [("Content-Type", "text/plain")])
    return [message]


def app(environ, start_response):
    path = environ.get("PATH_INFO", "")
    try:
        if _BLOCKED_PATH.search(path):
            log.warning("Blocked request path: %s", path)
            return _plain_response(start_response, "400 Bad Request", b"Bad Request: blocked")

        return asgi_middleware(environ, start_response)

    except UnicodeDecodeError:
        return _plain_response(start_response, "400 Bad Request", b"Bad Request: malformed path")

    except Exception:
        log.error("Unhandled WSGI error on " + path + ": " + str(traceback.format_exc()))
        return _plain_response(start_response, "500 Internal Server Error", b"Internal Server Error")
