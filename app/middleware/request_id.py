import time
import uuid
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.utils.logger import set_request_context, clear_request_context, get_logger

logger = get_logger(__name__)

# Incoming headers checked, in order, for an ID assigned upstream
INCOMING_ID_HEADERS = ("X-Request-ID", "X-Correlation-ID")
RESPONSE_ID_HEADER = "X-Request-ID"


def _incoming_request_id(request: Request) -> str:
    for header in INCOMING_ID_HEADERS:
        value = request.headers.get(header)
        if value:
            return value
    return str(uuid.uuid4())


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Give every request an ID for log correlation and echo it back.

    The ID lives on ``request.state.request_id`` and in the logging context
    until the response is sent.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        request_id = _incoming_request_id(request)
        request.state.request_id = request_id
        set_request_context(request_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"{request.method} {request.url.path} failed: {e}")
            raise
        else:
            elapsed_ms = (time.perf_counter() - started) * 1000
            response.headers[RESPONSE_ID_HEADER] = request_id
            logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)")
            return response
        finally:
            clear_request_context()
