"""
Custom exception hierarchy for FireGuard.

ARCHITECTURE:
- FireGuardError: Base class (extends HTTPException)
- Domain-specific exceptions: validation, external API, model, corpus errors
- The global handler logs every FireGuardError and renders its detail payload
"""

from typing import Optional, Dict, Any

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse


class FireGuardError(HTTPException):
    """
    Base exception class for all FireGuard errors.

    Extends FastAPI's HTTPException so that route handlers can raise domain
    errors directly and still get a proper HTTP response.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize FireGuard error.

        Args:
            message: Human-readable error message
            status_code: HTTP status code (default: 500)
            details: Additional context (field names, values, etc.)
        """
        self.message = message
        self.details = details or {}

        super().__init__(
            status_code=status_code,
            detail={
                "error": self.__class__.__name__,
                "message": message,
                "details": self.details,
            }
        )

    def __str__(self) -> str:
        """String representation for logging."""
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


# ============================================================================
# DATA VALIDATION ERRORS
# ============================================================================

class DataValidationError(FireGuardError):
    """Input data validation failed."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        details: Optional[Dict] = None,
        status_code: int = status.HTTP_422_UNPROCESSABLE_ENTITY,
    ):
        details = details or {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)

        super().__init__(
            message=message,
            status_code=status_code,
            details=details,
        )


class OutOfRegionError(DataValidationError):
    """Coordinates fall outside the supported bounding box."""

    def __init__(self, latitude: float, longitude: float, bbox: Optional[Dict] = None):
        super().__init__(
            "Coordinates must be within Canada",
            field="coordinates",
            value=f"{latitude},{longitude}",
            details={"bbox": bbox} if bbox else None,
            status_code=status.HTTP_400_BAD_REQUEST,
        )


class InvalidGridSizeError(DataValidationError):
    """Grid resolution outside the accepted range."""

    def __init__(self, grid_size: int, minimum: int, maximum: int):
        super().__init__(
            f"Grid size must be between {minimum} and {maximum}",
            field="gridSize",
            value=grid_size,
            details={"min": minimum, "max": maximum},
            status_code=status.HTTP_400_BAD_REQUEST,
        )


# ============================================================================
# EXTERNAL API ERRORS
# ============================================================================

class ExternalAPIError(FireGuardError):
    """External API request failed."""

    def __init__(
        self,
        message: str,
        service_name: Optional[str] = None,
        status_code: int = status.HTTP_502_BAD_GATEWAY,
        response_body: Optional[str] = None,
        details: Optional[Dict] = None,
    ):
        details = details or {}
        if service_name:
            details["service"] = service_name
        if response_body:
            details["response"] = response_body[:500]  # Truncate long responses

        super().__init__(
            message=message,
            status_code=status_code,
            details=details,
        )


class NASAFIRMSAPIError(ExternalAPIError):
    """NASA FIRMS API request failed."""

    def __init__(self, message: str, details: Optional[Dict] = None):
        super().__init__(
            message=message,
            service_name="NASA FIRMS",
            details=details,
        )


class OpenMeteoAPIError(ExternalAPIError):
    """Open-Meteo API request failed."""

    def __init__(self, message: str, details: Optional[Dict] = None):
        super().__init__(
            message=message,
            service_name="Open-Meteo",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
        )


class APITimeoutError(ExternalAPIError):
    """External API request timed out."""

    def __init__(self, message: str, service_name: Optional[str] = None, timeout_seconds: Optional[float] = None):
        details = {}
        if timeout_seconds:
            details["timeout_seconds"] = timeout_seconds

        super().__init__(
            message=message,
            service_name=service_name,
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            details=details,
        )


class RateLimitExceededError(ExternalAPIError):
    """External API rate limit exceeded."""

    def __init__(self, message: str, service_name: Optional[str] = None, retry_after: Optional[int] = None):
        details = {}
        if retry_after:
            details["retry_after_seconds"] = retry_after

        super().__init__(
            message=message,
            service_name=service_name,
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            details=details,
        )


# ============================================================================
# MODEL ERRORS
# ============================================================================

class ModelError(FireGuardError):
    """Classifier training or inference failed."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict] = None,
    ):
        super().__init__(
            message=message,
            status_code=status_code,
            details=details,
        )


class ModelArtifactError(ModelError):
    """Persisted classifier artifact is missing, corrupt or incompatible."""

    def __init__(self, message: str, path: Optional[str] = None, details: Optional[Dict] = None):
        details = details or {}
        if path:
            details["path"] = path

        super().__init__(message=message, details=details)


class ModelNotReadyError(ModelError):
    """Risk engine has not finished its startup build."""

    def __init__(self, message: str = "Risk model is still loading"):
        super().__init__(
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )


# ============================================================================
# CORPUS ERRORS
# ============================================================================

class CorpusError(FireGuardError):
    """Training corpus could not be read."""

    def __init__(self, message: str, path: Optional[str] = None, details: Optional[Dict] = None):
        details = details or {}
        if path:
            details["path"] = path

        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
        )


# ============================================================================
# GLOBAL EXCEPTION HANDLER (for FastAPI)
# ============================================================================

async def fireguard_exception_handler(request: Request, exc: FireGuardError) -> JSONResponse:
    """
    Global exception handler for FastAPI.

    Logs every FireGuardError with its context and renders the structured
    detail payload with the exception's status code.

    Usage in main.py:
        app.add_exception_handler(FireGuardError, fireguard_exception_handler)
    """
    from fireguard.utils.logger import get_logger

    logger = get_logger(__name__)

    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        f"Exception: {exc.__class__.__name__}",
        error_type=exc.__class__.__name__,
        message=exc.message,
        details=exc.details,
        status_code=exc.status_code,
        path=str(request.url),
        method=request.method,
    )

    return JSONResponse(status_code=exc.status_code, content=exc.detail)
