"""Request logging middleware.

Logs every HTTP request with method, path, status code, latency and a short
request id for correlation. The request id is also put on request.state so
handlers and the AppError handler can echo it in ApiResponse.

Log format:
    INFO [POST] /api/v1/transfers → 201 (23ms) req_a1b2c3d4e5f6
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.bk_common.response import new_request_id

logger = logging.getLogger("bank.request")


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.request_id = new_request_id()

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        response.headers["X-Request-ID"] = request.state.request_id
        logger.info(
            "[%s] %s → %d (%.0fms) %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request.state.request_id,
        )
        return response
