"""
Error message constants and utilities for user-friendly error handling.
"""
from typing import Dict, Optional


class ErrorCodes:
    EMPTY_DATA = "EMPTY_DATA"
    TOO_MANY_ROWS = "TOO_MANY_ROWS"
    TOO_MANY_COLUMNS = "TOO_MANY_COLUMNS"
    INVALID_TRANSFORM = "INVALID_TRANSFORM"
    PROCESSING_ERROR = "PROCESSING_ERROR"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    TIMEOUT = "TIMEOUT"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    ErrorCodes.EMPTY_DATA: {
        "message": "Hmm, there's nothing to analyze",
        "detail": "We need at least one column header and one row of data to find anything interesting.",
        "suggestion": "💡 Check that your file has a header row followed by data. If you removed rows or columns while preparing your data, try keeping a few more."
    },
    ErrorCodes.TOO_MANY_ROWS: {
        "message": "Oops! That's a lot of rows",
        "detail": "Your table has more rows than we analyze in one go.",
        "suggestion": "💡 Try analyzing a sample of your data. Most trends and outliers show up clearly in the first few thousand rows!"
    },
    ErrorCodes.TOO_MANY_COLUMNS: {
        "message": "Oops! That's a lot of columns",
        "detail": "Your table has more columns than we analyze in one go.",
        "suggestion": "💡 Exclude the columns you don't need (IDs, notes, free text) and try again."
    },
    ErrorCodes.INVALID_TRANSFORM: {
        "message": "We couldn't apply those changes",
        "detail": "One of your column changes doesn't fit the data.",
        "suggestion": "💡 Make sure every renamed column has a unique, non-empty name and that the columns you changed still exist."
    },
    ErrorCodes.PROCESSING_ERROR: {
        "message": "Something went wrong while processing",
        "detail": "We hit a snag while analyzing your data. This could be due to unusual data formats or structure issues.",
        "suggestion": "💡 Check that your data has headers in the first row and values organized in columns, then try again."
    },
    ErrorCodes.RATE_LIMIT_EXCEEDED: {
        "message": "Whoa there! Slow down a bit",
        "detail": "You're sending analyses faster than we can keep up! We limit requests to keep the service fast for everyone.",
        "suggestion": "💡 Take a quick break and try again in about a minute. Your data will still be there!"
    },
    ErrorCodes.TIMEOUT: {
        "message": "This is taking longer than expected",
        "detail": "Your table is taking a while to analyze. This usually happens with very large tables.",
        "suggestion": "💡 Try a smaller sample of your data, or exclude columns you don't need."
    },
    ErrorCodes.INTERNAL_ERROR: {
        "message": "An internal error occurred",
        "detail": "The server failed while handling your request. Nothing you sent was lost.",
        "suggestion": "💡 Try again in a moment. If it keeps failing, send us the correlation ID shown below."
    },
    ErrorCodes.UNKNOWN_ERROR: {
        "message": "Hmm, something unexpected happened",
        "detail": "We encountered an issue we weren't expecting. Don't worry - it's not your fault!",
        "suggestion": "💡 Give it another try in a moment. If the problem keeps happening, try a different file."
    }
}


def get_error_response(error_code: str, additional_detail: Optional[str] = None) -> Dict[str, str]:
    """
    Get user-friendly error response for an error code.

    Args:
        error_code: One of the ErrorCodes constants
        additional_detail: Optional additional detail to append

    Returns:
        Dictionary with code, message, detail, and suggestion
    """
    error_info = ERROR_MESSAGES.get(error_code, ERROR_MESSAGES[ErrorCodes.UNKNOWN_ERROR])

    response = {
        "code": error_code,
        "message": error_info["message"],
        "detail": error_info["detail"],
        "suggestion": error_info["suggestion"]
    }

    if additional_detail:
        response["detail"] = f"{response['detail']} {additional_detail}"

    return response
