"""
Request middleware: correlation ids, request timing and timeouts.
"""
import uuid
import asyncio
import logging
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from fastapi import status
from fastapi.responses import JSONResponse
from chartengine.core.errors import ErrorCodes, get_error_response
from chartengine.core.performance import PerformanceMonitor

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


def _error_response(status_code: int, code: str, correlation_id: str) -> JSONResponse:
    body = get_error_response(code)
    body["correlation_id"] = correlation_id
    return JSONResponse(status_code=status_code, content=body, headers={CORRELATION_HEADER: correlation_id})


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """Tag every request, its log records and its response with a correlation id."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        old_factory = logging.getLogRecordFactory()

        def record_factory(*args, **kwargs):
            record = old_factory(*args, **kwargs)
            record.correlation_id = correlation_id
            return record

        logging.setLogRecordFactory(record_factory)
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.perf_counter() - started
            logger.error(
                f"Request failed: {request.method} {request.url.path} - {e} ({duration:.3f}s)",
                extra={"method": request.method, "path": request.url.path, "duration": duration},
                exc_info=True
            )
            return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorCodes.UNKNOWN_ERROR, correlation_id)
        finally:
            logging.setLogRecordFactory(old_factory)

        duration = time.perf_counter() - started
        PerformanceMonitor.record_metric(
            "request_duration",
            duration,
            {
                "correlation_id": correlation_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
            }
        )
        response.headers[CORRELATION_HEADER] = correlation_id
        response.headers["X-Response-Time"] = f"{duration:.3f}"
        logger.info(
            f"{request.method} {request.url.path} - {response.status_code} ({duration:.3f}s)",
            extra={"status_code": response.status_code, "duration": duration, "correlation_id": correlation_id}
        )
        return response


class TimeoutMiddleware(BaseHTTPMiddleware):
    """Answer 504 when a request runs past ``timeout_seconds``."""

    def __init__(self, app, timeout_seconds: float):
        super().__init__(app)
        self.timeout_seconds = timeout_seconds

    async def dispatch(self, request: Request, call_next):
        try:
            return await asyncio.wait_for(call_next(request), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            correlation_id = getattr(request.state, "correlation_id", "unknown")
            logger.error(f"Request timeout after {self.timeout_seconds} seconds: {request.url.path}")
            return _error_response(status.HTTP_504_GATEWAY_TIMEOUT, ErrorCodes.TIMEOUT, correlation_id)
