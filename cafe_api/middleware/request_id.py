import time
import uuid
from typing import Callable
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from cafe_api.utils.logger import set_request_context, clear_request_context, get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADERS = ("X-Correlation-ID", "X-Request-ID")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with an ID for log correlation.

    An incoming ``X-Correlation-ID`` wins over ``X-Request-ID``; without
    either a UUID4 is generated. The ID is kept on ``request.state``, put in
    the logging context for the duration of the request and echoed back in
    the ``X-Request-ID`` response header.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        request_id = next(
            (request.headers[h] for h in REQUEST_ID_HEADERS if request.headers.get(h)),
            str(uuid.uuid4())
        )
        request.state.request_id = request_id
        set_request_context(request_id)

        started = time.perf_counter()
        logger.info(f"{request.method} {request.url.path} started")
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)"
            )
            return response
        except Exception as e:
            logger.error(f"{request.method} {request.url.path} failed: {e}")
            raise
        finally:
            clear_request_context()
