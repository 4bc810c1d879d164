import sys
import asyncio
import logging
from typing import Dict, Optional
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from slowapi.errors import RateLimitExceeded
from csvviz.api.routes import router, limiter
from csvviz.api.metrics import router as metrics_router
from csvviz.core.config import get_settings
from csvviz.core.errors import ErrorCodes, get_error_response
from csvviz.core.logging import configure_logging
from csvviz.core.middleware import CorrelationIDMiddleware

# Load environment variables
load_dotenv()

# Load and validate configuration
try:
    settings = get_settings()
except Exception as e:
    logging.basicConfig(level=logging.ERROR)
    logging.getLogger(__name__).error(f"Failed to load configuration: {e}")
    sys.exit(1)

configure_logging(settings.log_level, settings.log_format)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="CSVVIZ Analysis API",
    description="Statistics, insights and chart data for tabular uploads",
    version="1.0.0"
)

app.state.limiter = limiter
app.state.settings = settings


def error_json(request: Request, status_code: int, error_code: str, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    """Structured error body for failures raised outside the route handlers."""
    correlation_id = getattr(request.state, 'correlation_id', 'unknown')
    content = get_error_response(error_code)
    content['correlation_id'] = correlation_id
    return JSONResponse(
        status_code=status_code,
        content=content,
        headers={**(headers or {}), "X-Correlation-ID": correlation_id}
    )


def on_rate_limited(request: Request, exc: RateLimitExceeded):
    logger.warning(f"Rate limit hit on {request.url.path}: {exc.detail}")
    return error_json(request, 429, ErrorCodes.RATE_LIMIT_EXCEEDED, {"Retry-After": "60"})


app.add_exception_handler(RateLimitExceeded, on_rate_limited)


class AnalysisTimeoutMiddleware(BaseHTTPMiddleware):
    """Answer 504 when a request runs past REQUEST_TIMEOUT_SECONDS."""

    async def dispatch(self, request: Request, call_next):
        limit = get_settings().request_timeout_seconds
        try:
            return await asyncio.wait_for(call_next(request), timeout=limit)
        except asyncio.TimeoutError:
            logger.error(f"{request.method} {request.url.path} gave up after {limit}s")
            return error_json(request, 504, ErrorCodes.TIMEOUT)


# Last added runs first: correlation IDs wrap everything else
app.add_middleware(AnalysisTimeoutMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization", "X-Correlation-ID"],
    expose_headers=["X-Correlation-ID"]
)
app.add_middleware(CorrelationIDMiddleware)

app.include_router(router, prefix="/api")
app.include_router(metrics_router, prefix="/api")


@app.get("/")
async def root():
    return {"message": "CSVVIZ Analysis API is running"}


logger.info("Application started successfully")
