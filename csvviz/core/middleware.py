"""
Custom middleware for request tracing and timing.
"""
import uuid
import time
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from fastapi import status
from fastapi.responses import JSONResponse
from csvviz.core.errors import ErrorCodes, get_error_response
from csvviz.core.performance import PerformanceMonitor

logger = logging.getLogger(__name__)


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """
    Tag each request with a correlation ID.

    The ID comes from the X-Correlation-ID header when the caller sends one.
    It is stored on ``request.state``, stamped on every log record emitted
    while the request runs, and echoed back in the response headers.
    """

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        old_factory = logging.getLogRecordFactory()

        def record_factory(*args, **kwargs):
            record = old_factory(*args, **kwargs)
            record.correlation_id = correlation_id
            return record

        logging.setLogRecordFactory(record_factory)

        start_time = time.time()
        method, path = request.method, request.url.path

        try:
            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(
                    f"Request failed: {method} {path} - {e}",
                    extra={"method": method, "path": path},
                    exc_info=True
                )
                content = get_error_response(ErrorCodes.INTERNAL_ERROR)
                content["correlation_id"] = correlation_id
                response = JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)

            duration = time.time() - start_time
            PerformanceMonitor.record_metric(
                "request_duration",
                duration,
                {"method": method, "path": path, "status_code": response.status_code}
            )

            response.headers["X-Correlation-ID"] = correlation_id
            response.headers["X-Response-Time"] = f"{duration:.3f}"

            logger.info(
                f"{method} {path} - {response.status_code} ({duration:.3f}s)",
                extra={"method": method, "path": path, "status_code": response.status_code, "duration": duration}
            )
            return response
        finally:
            logging.setLogRecordFactory(old_factory)
