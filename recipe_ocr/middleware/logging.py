"""Access logging with per-request correlation ids."""

import logging
import time
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from recipe_ocr.core.request_id import new_request_id

logger = logging.getLogger(__name__)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


def _upload_size(request: Request) -> Optional[int]:
    length = request.headers.get("content-length")
    return int(length) if length and length.isdigit() else None


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Assign a request id, echo it back in ``X-Request-ID`` and log timings."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = new_request_id()
        request.state.request_id = request_id
        route = f"{request.method} {request.url.path}"
        started = time.perf_counter()

        logger.info(
            f"-> {route}",
            extra={
                "request_id": request_id,
                "content_type": request.headers.get("content-type"),
                "upload_bytes": _upload_size(request),
                "client_ip": request.client.host if request.client else None,
            },
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"<- {route} failed: {e}",
                extra={"request_id": request_id, "process_time_ms": _elapsed_ms(started)},
                exc_info=True,
            )
            raise

        logger.info(
            f"<- {route} {response.status_code}",
            extra={
                "request_id": request_id,
                "status_code": response.status_code,
                "process_time_ms": _elapsed_ms(started),
            },
        )
        response.headers["X-Request-ID"] = request_id
        return response
