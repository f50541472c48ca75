"""
Unit tests for the error envelope and request logging middleware.
"""

from django.db import DatabaseError
from django.http import HttpResponse
from django.test import RequestFactory
from rest_framework.exceptions import NotAuthenticated, ValidationError

from apps.core.exceptions import (
    AppValidationError,
    NotFoundError,
    PersistenceError,
    unified_exception_handler,
)
from apps.core.middleware import RequestLoggingMiddleware


def context():
    return {"request": RequestFactory().get("/api/v1/orders/1/"), "view": None}


class TestUnifiedExceptionHandler:
    def test_app_exception(self):
        exc = NotFoundError(detail="Order 1 does not exist.", code="ORDER_NOT_FOUND")

        response = unified_exception_handler(exc, context())

        assert response.status_code == 404
        assert response.data == {
            "type": "error",
            "code": "ORDER_NOT_FOUND",
            "message": "Resource not found",
            "detail": ["Order 1 does not exist."],
        }

    def test_validation_detail_is_a_list(self):
        exc = AppValidationError(detail=["a", "b"])

        response = unified_exception_handler(exc, context())

        assert response.status_code == 400
        assert response.data["detail"] == ["a", "b"]

    def test_persistence_error_hides_cause(self):
        try:
            try:
                raise DatabaseError("relation orders does not exist")
            except DatabaseError as db_exc:
                raise PersistenceError("loading order 1") from db_exc
        except PersistenceError as exc:
            caught = exc

        response = unified_exception_handler(caught, context())

        assert response.status_code == 500
        assert response.data["code"] == "INTERNAL_ERROR"
        assert response.data["detail"] == []
        assert "relation orders" in str(caught)

    def test_drf_validation_error(self):
        exc = ValidationError({"units_per_box": ["A valid integer is required."]})

        response = unified_exception_handler(exc, context())

        assert response.status_code == 400
        assert response.data["code"] == "VALIDATION_ERROR"
        assert response.data["detail"] == ["units_per_box: A valid integer is required."]

    def test_other_drf_error(self):
        response = unified_exception_handler(NotAuthenticated(), context())

        assert response.status_code == 401
        assert response.data["code"] == "NOT_AUTHENTICATED"

    def test_unexpected_error(self):
        response = unified_exception_handler(RuntimeError("boom"), context())

        assert response.status_code == 500
        assert response.data["message"] == "An unexpected error occurred"
        assert "boom" not in str(response.data)


class TestRequestLoggingMiddleware:
    def test_generates_request_id(self):
        middleware = RequestLoggingMiddleware(lambda request: HttpResponse("ok"))

        response = middleware(RequestFactory().get("/api/v1/orders/"))

        assert len(response["X-Request-ID"]) == 8

    def test_echoes_incoming_request_id(self):
        middleware = RequestLoggingMiddleware(lambda request: HttpResponse(status=404))

        response = middleware(RequestFactory().get("/x/", HTTP_X_REQUEST_ID="abc123"))

        assert response["X-Request-ID"] == "abc123"
