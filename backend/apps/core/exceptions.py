"""
Unified exception hierarchy and DRF exception handler.

Services raise subclasses of BaseAppException; views never catch them.
The handler turns every exception into the same JSON envelope:

    {
        "type": "error",
        "code": "ORDER_NOT_FOUND",
        "message": "Order not found",
        "detail": ["Order 42 does not exist."]
    }

Internal failures are logged with request context and answered with a
generic message, never a stack trace or patient data.
"""

import structlog
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = structlog.get_logger(__name__)


# ============================================================
# Base class
# ============================================================
class BaseAppException(Exception):
    """Base class for every domain error."""

    type = "error"
    code = "UNKNOWN_ERROR"
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "An unexpected error occurred"

    def __init__(self, message=None, detail=None, code=None):
        if message:
            self.message = message
        if code:
            self.code = code

        # detail is always a list so clients can iterate it
        if detail is None:
            self.detail = []
        elif isinstance(detail, str):
            self.detail = [detail]
        else:
            self.detail = list(detail)

        super().__init__(self.message)

    def to_dict(self):
        return {
            "type": self.type,
            "code": self.code,
            "message": self.message,
            "detail": self.detail,
        }


class NotFoundError(BaseAppException):
    """An order, prescription or notification id does not exist."""

    code = "NOT_FOUND"
    http_status = status.HTTP_404_NOT_FOUND
    message = "Resource not found"


class InvalidTransitionError(BaseAppException):
    """An order was asked to advance past its terminal status."""

    code = "INVALID_TRANSITION"
    http_status = status.HTTP_409_CONFLICT
    message = "Invalid order status transition"


class AppValidationError(BaseAppException):
    """
    Prescription fields failed validation.

    Named AppValidationError to avoid clashing with
    rest_framework.exceptions.ValidationError.
    """

    code = "VALIDATION_ERROR"
    http_status = status.HTTP_400_BAD_REQUEST
    message = "Input validation failed"


class ConsensusRequiredError(BaseAppException):
    """The patient has not given consent to have prescriptions tracked."""

    code = "CONSENSUS_REQUIRED"
    http_status = status.HTTP_409_CONFLICT
    message = "The patient must give consent before prescriptions can be added"


class PersistenceError(BaseAppException):
    """A storage operation failed; wraps the original exception with context."""

    code = "INTERNAL_ERROR"
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "An unexpected error occurred"

    def __init__(self, operation, detail=None):
        self.operation = operation
        super().__init__(detail=detail)

    def __str__(self):
        return f"{self.operation}: {self.__cause__ or self.message}"

    def to_dict(self):
        # operation context stays in the logs
        return {
            "type": self.type,
            "code": self.code,
            "message": self.message,
            "detail": [],
        }


# ============================================================
# DRF exception handler
# ============================================================
def unified_exception_handler(exc, context):
    """Render app, DRF and unexpected exceptions in one envelope."""
    request = context.get("request")
    view = context.get("view")

    log_context = {
        "path": request.path if request else "unknown",
        "method": request.method if request else "unknown",
        "view": view.__class__.__name__ if view else "unknown",
    }

    if isinstance(exc, BaseAppException):
        if exc.http_status >= 500:
            logger.error(
                "app_exception",
                code=exc.code,
                error=str(exc),
                exc_info=exc,
                **log_context,
            )
        else:
            logger.info("app_exception", code=exc.code, **log_context)
        return Response(exc.to_dict(), status=exc.http_status)

    response = drf_exception_handler(exc, context)

    if response is not None:
        logger.warning(
            "api_exception",
            error_type=exc.__class__.__name__,
            **log_context,
        )

        detail = []
        if isinstance(response.data, dict):
            for field, messages in response.data.items():
                if isinstance(messages, list):
                    for msg in messages:
                        detail.append(f"{field}: {msg}")
                else:
                    detail.append(f"{field}: {messages}")
        elif isinstance(response.data, list):
            detail = [str(item) for item in response.data]
        else:
            detail = [str(response.data)]

        if response.status_code == status.HTTP_400_BAD_REQUEST:
            code, message = "VALIDATION_ERROR", "Input validation failed"
        else:
            code = str(getattr(exc, "default_code", "error")).upper()
            message = str(getattr(exc, "default_detail", "An error occurred"))

        response.data = {
            "type": "error",
            "code": code,
            "message": message,
            "detail": detail,
        }
        return response

    logger.exception("unexpected_error", **log_context)

    return Response(
        {
            "type": "error",
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred",
            "detail": [],
        },
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
