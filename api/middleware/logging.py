"""Request logging middleware."""

import logging
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("menucost.api")

COMPANY_HEADER = "X-Company-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every request with a short request id, the calling company and timing.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id
        company = request.headers.get(COMPANY_HEADER, "-")
        prefix = f"[{request_id}] [{company}] {request.method} {request.url.path}"

        start_time = time.perf_counter()
        logger.info(f"{prefix} - Started")

        try:
            response = await call_next(request)
        except Exception as e:
            duration = (time.perf_counter() - start_time) * 1000
            logger.error(f"{prefix} - Error after {duration:.2f}ms: {str(e)}")
            raise

        duration = (time.perf_counter() - start_time) * 1000

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time-Ms"] = f"{duration:.2f}"

        log_level = logging.INFO if response.status_code < 400 else logging.WARNING
        logger.log(log_level, f"{prefix} - {response.status_code} in {duration:.2f}ms")

        return response
