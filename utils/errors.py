"""
Error taxonomy for the visibility service.

Only ProviderCallError is recovered inline (inside the dispatcher); the other
errors fail the request and are mapped to HTTP responses in src/app.py.
"""

from datetime import datetime
from typing import List, Optional


class ErrorCode:
    INVALID_DOMAIN = "INVALID_DOMAIN"
    DUPLICATE_DOMAINS = "DUPLICATE_DOMAINS"
    TOO_MANY_COMPETITORS = "TOO_MANY_COMPETITORS"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    AI_PROVIDER_ERROR = "AI_PROVIDER_ERROR"
    ANALYSIS_FAILED = "ANALYSIS_FAILED"


class VisibilityError(Exception):
    """Base error carrying a machine-readable code and an HTTP status."""

    def __init__(self, message: str, code: str = ErrorCode.ANALYSIS_FAILED, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code

    def to_dict(self) -> dict:
        return {"error": self.message}


class ValidationError(VisibilityError):
    """Request rejected before reaching the pipeline."""

    def __init__(self, details: List[str], code: str = ErrorCode.INVALID_DOMAIN):
        super().__init__("Validation failed", code=code, status_code=400)
        self.details = list(details)

    def to_dict(self) -> dict:
        return {"error": self.message, "details": self.details}


class RateLimitError(VisibilityError):
    """Caller exceeded its request quota."""

    def __init__(self, reset_time: datetime):
        super().__init__(
            "Rate limit exceeded",
            code=ErrorCode.RATE_LIMIT_EXCEEDED,
            status_code=429
        )
        self.reset_time = reset_time

    def to_dict(self) -> dict:
        return {"error": self.message, "resetTime": self.reset_time.isoformat()}


class ProviderCallError(VisibilityError):
    """A text-generation provider failed to answer."""

    def __init__(self, provider: str, reason: Optional[str] = None):
        message = f"Error querying {provider}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, code=ErrorCode.AI_PROVIDER_ERROR, status_code=502)
        self.provider = provider
