"""
API error types and their JSON rendering.

Every error surfaced to HTTP clients is an ``ApiError`` carrying a status
code, a stable machine-readable code and a human message:

    {"error": {"code": "NOT_FOUND", "message": "Subscription not found"}}
"""

from typing import Any, Dict, List, Optional


class ApiError(Exception):
    """Base class for errors rendered as structured API responses."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        details: Optional[List[Dict[str, str]]] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_response(self) -> Dict[str, Any]:
        error: Dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            error["details"] = self.details
        return {"error": error}


class ValidationApiError(ApiError):
    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str = "Invalid input data", details: Optional[List[Dict[str, str]]] = None):
        super().__init__(message, details)


class UnauthorizedError(ApiError):
    status_code = 401
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class NotFoundError(ApiError):
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found")


class AIServiceUnavailableError(ApiError):
    """The text-generation API could not produce a trustworthy answer.

    Transient: raised after the retry budget is spent, on non-retryable
    upstream errors, and when generation stopped for any reason other
    than a normal ``stop``.
    """

    status_code = 503
    code = "AI_SERVICE_UNAVAILABLE"

    def __init__(self, message: str = "AI service is temporarily unavailable"):
        super().__init__(message)


class AIResponseFormatError(ApiError):
    """The text-generation API answered, but not in the expected shape."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str = "Invalid response format from AI service"):
        super().__init__(message)
