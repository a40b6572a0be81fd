"""
Error codes, user-facing messages and the engine's exception types.

The engine only raises for caller contract violations; malformed cell
values are excluded or zeroed by the services, never raised.
"""
from typing import Dict, Optional


# Error codes
class ErrorCodes:
    INVALID_ROWS = "INVALID_ROWS"
    INVALID_COLUMN = "INVALID_COLUMN"
    TOO_MANY_ROWS = "TOO_MANY_ROWS"
    PROCESSING_ERROR = "PROCESSING_ERROR"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    TIMEOUT = "TIMEOUT"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class EngineError(Exception):
    """Base class for errors raised by the inference engine."""

    code = ErrorCodes.PROCESSING_ERROR

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class InvalidArgumentError(EngineError, ValueError):
    """Rows or column arguments do not have the shape the engine expects."""

    code = ErrorCodes.INVALID_ROWS


ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    ErrorCodes.INVALID_ROWS: {
        "message": "We couldn't read those rows",
        "detail": "The data must be a list of records that all share the same column names.",
        "suggestion": "💡 Make sure the first row has column headers and that no header is blank or repeated."
    },
    ErrorCodes.INVALID_COLUMN: {
        "message": "That column doesn't look right",
        "detail": "A column name is empty or contains characters we can't work with.",
        "suggestion": "💡 Rename the column using letters, numbers and spaces, then try again."
    },
    ErrorCodes.TOO_MANY_ROWS: {
        "message": "That's a lot of rows!",
        "detail": "This request carries more rows than we accept in one go.",
        "suggestion": "💡 Send a sample of your data, most charts look the same with the first few thousand rows."
    },
    ErrorCodes.PROCESSING_ERROR: {
        "message": "Something went wrong while analyzing",
        "detail": "We hit a snag while working out the column types or chart data.",
        "suggestion": "💡 Check that each column holds one kind of value, then try again."
    },
    ErrorCodes.RATE_LIMIT_EXCEEDED: {
        "message": "Whoa there! Slow down a bit",
        "detail": "You're sending requests faster than we can keep up with.",
        "suggestion": "💡 Wait about a minute and try again."
    },
    ErrorCodes.TIMEOUT: {
        "message": "This is taking longer than expected",
        "detail": "Your request took too long to process.",
        "suggestion": "💡 Try again with fewer rows."
    },
    ErrorCodes.UNKNOWN_ERROR: {
        "message": "Hmm, something unexpected happened",
        "detail": "We encountered an issue we weren't expecting. Don't worry - it's not your fault!",
        "suggestion": "💡 Give it another try in a moment."
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
