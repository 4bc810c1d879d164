import logging
from typing import Dict, List, Optional
from fastapi import APIRouter, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from csvviz.core.config import get_settings
from csvviz.core.schemas import AnalyzeRequest, AnalyzeResponse, ReanalyzeRequest
from csvviz.core.errors import ErrorCodes, get_error_response
from csvviz.core.sanitization import sanitize_filename, sanitize_for_logging
from csvviz.services.analysis import analyze_data
from csvviz.services.transforms import EmptyTableError, TransformError, reanalyze

logger = logging.getLogger(__name__)

router = APIRouter()

limiter = Limiter(key_func=get_remote_address)


def analysis_rate_limit() -> str:
    """Per-IP limit for the analysis endpoints, read from settings on every request."""
    return f"{get_settings().rate_limit_per_minute}/minute"


def _error(request: Request, status_code: int, error_code: str, detail: Optional[str] = None) -> HTTPException:
    error_info = get_error_response(error_code, detail)
    error_info['correlation_id'] = getattr(request.state, 'correlation_id', 'unknown')
    return HTTPException(status_code=status_code, detail=error_info)


def _validate_table(request: Request, headers: List[str], rows: List[Dict[str, str]]):
    """Reject tables the engine should never see: empty, or over the size limits."""
    settings = get_settings()

    if not headers or not rows:
        raise _error(request, 400, ErrorCodes.EMPTY_DATA)

    if len(rows) > settings.max_rows:
        raise _error(
            request, 413, ErrorCodes.TOO_MANY_ROWS,
            f"Maximum is {settings.max_rows} rows. Your table has {len(rows)}."
        )

    if len(headers) > settings.max_columns:
        raise _error(
            request, 413, ErrorCodes.TOO_MANY_COLUMNS,
            f"Maximum is {settings.max_columns} columns. Your table has {len(headers)}."
        )


@router.get("/health")
async def health_check():
    return {"status": "ok"}


@router.post("/analyze", response_model=AnalyzeResponse)
@limiter.limit(analysis_rate_limit)
def analyze(request: Request, payload: AnalyzeRequest):
    """
    Analyze an already-parsed table.

    The body carries the headers, the rows as string-valued records keyed
    by header, the original file name, and optionally the identifier
    columns to leave out of aggregate computations.
    """
    _validate_table(request, payload.headers, payload.rows)
    file_name = sanitize_filename(payload.file_name)

    logger.info(
        f"Analyzing {sanitize_for_logging(file_name)}: "
        f"{len(payload.rows)} rows x {len(payload.headers)} columns"
    )

    try:
        result = analyze_data(payload.headers, payload.rows, file_name, payload.unique_column_names)
    except Exception as e:
        logger.error(f"Unexpected error analyzing {sanitize_for_logging(file_name)}: {e}", exc_info=True)
        raise _error(request, 500, ErrorCodes.PROCESSING_ERROR)

    return AnalyzeResponse(success=True, data=result)


@router.post("/reanalyze", response_model=AnalyzeResponse)
@limiter.limit(analysis_rate_limit)
def reanalyze_table(request: Request, payload: ReanalyzeRequest):
    """Apply data prep transforms to a table and analyze the result from scratch."""
    _validate_table(request, payload.headers, payload.rows)
    file_name = sanitize_filename(payload.file_name)

    try:
        result = reanalyze(
            payload.headers, payload.rows, file_name, payload.prep, payload.unique_column_names
        )
    except EmptyTableError as e:
        raise _error(request, 400, ErrorCodes.EMPTY_DATA, str(e))
    except TransformError as e:
        raise _error(request, 400, ErrorCodes.INVALID_TRANSFORM, str(e))
    except Exception as e:
        logger.error(f"Unexpected error re-analyzing {sanitize_for_logging(file_name)}: {e}", exc_info=True)
        raise _error(request, 500, ErrorCodes.PROCESSING_ERROR)

    return AnalyzeResponse(success=True, data=result)
