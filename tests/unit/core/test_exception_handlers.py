"""
Unit Tests for Exception Handlers.

Tests the exception handler functions in isolation.
"""

import json
from unittest.mock import MagicMock

import pytest
from fastapi import Request
from fastapi.exceptions import RequestValidationError

from todo_miniapp.core.exception_handlers import (
    EXCEPTION_STATUS_MAP,
    _get_request_id,
    application_error_handler,
    unhandled_exception_handler,
    validation_error_handler,
)
from todo_miniapp.core.exceptions import (
    ApplicationError,
    AuthenticationError,
    AuthorizationError,
    DatabaseError,
    InternalError,
    NotFoundError,
    ValidationError,
)


def _body(response) -> dict:
    return json.loads(response.body)


class TestExceptionStatusMapping:
    """Tests for exception to HTTP status code mapping."""

    @pytest.mark.parametrize(
        "exc_type,status",
        [
            (ValidationError, 400),
            (AuthenticationError, 401),
            (AuthorizationError, 403),
            (NotFoundError, 404),
            (InternalError, 500),
            (DatabaseError, 500),
        ],
    )
    def test_status_codes(self, exc_type, status):
        assert EXCEPTION_STATUS_MAP[exc_type] == status


class TestExceptionCodes:
    """Each exception carries a stable machine-readable code."""

    def test_codes(self):
        assert NotFoundError().code == "RES_NOT_FOUND"
        assert ValidationError().code == "VAL_VALIDATION_ERROR"
        assert AuthenticationError().code == "AUTH_UNAUTHORIZED"
        assert AuthorizationError().code == "AUTHZ_FORBIDDEN"
        assert InternalError().code == "SYS_INTERNAL_ERROR"
        assert DatabaseError().code == "SYS_DATABASE_ERROR"

    def test_authentication_default_message(self):
        assert AuthenticationError().message == "Not authenticated"

    def test_database_error_is_internal_error(self):
        assert isinstance(DatabaseError(), InternalError)


class TestGetRequestId:
    """Tests for request ID extraction."""

    def test_extracts_from_request_state(self):
        request = MagicMock(spec=Request)
        request.state.request_id = "state-123"
        request.headers = {}

        assert _get_request_id(request) == "state-123"

    def test_extracts_from_header(self):
        request = MagicMock(spec=Request)
        del request.state.request_id
        request.headers = {"x-request-id": "header-456"}

        assert _get_request_id(request) == "header-456"

    def test_returns_none_when_not_present(self):
        request = MagicMock(spec=Request)
        del request.state.request_id
        request.headers = {}

        assert _get_request_id(request) is None


class TestApplicationErrorHandler:
    """Tests for application_error_handler."""

    @pytest.fixture
    def mock_request(self):
        request = MagicMock(spec=Request)
        request.url.path = "/api/tasks/1"
        request.method = "PUT"
        request.headers = {"x-request-id": "test-123"}
        del request.state.request_id
        return request

    async def test_not_found_returns_404(self, mock_request):
        response = await application_error_handler(mock_request, NotFoundError("Task not found"))

        assert response.status_code == 404
        assert _body(response) == {
            "success": False,
            "error": "Task not found",
            "code": "RES_NOT_FOUND",
            "request_id": "test-123",
        }

    async def test_validation_error_includes_details(self, mock_request):
        exc = ValidationError("Title is required", details={"field": "title"})

        response = await application_error_handler(mock_request, exc)

        assert response.status_code == 400
        body = _body(response)
        assert body["error"] == "Title is required"
        assert body["details"] == {"field": "title"}

    async def test_authentication_error_returns_401(self, mock_request):
        response = await application_error_handler(mock_request, AuthenticationError())

        assert response.status_code == 401
        body = _body(response)
        assert body["success"] is False
        assert body["error"] == "Not authenticated"
        assert body["code"] == "AUTH_UNAUTHORIZED"

    async def test_authorization_error_returns_403(self, mock_request):
        response = await application_error_handler(mock_request, AuthorizationError("Access denied"))
        assert response.status_code == 403

    async def test_database_error_message_is_hidden(self, mock_request):
        exc = DatabaseError("Database operation failed: create_task")

        response = await application_error_handler(mock_request, exc)

        assert response.status_code == 500
        body = _body(response)
        assert body["error"] == "Internal server error"
        assert body["code"] == "SYS_DATABASE_ERROR"
        assert "create_task" not in response.body.decode()

    async def test_unmapped_application_error_returns_500(self, mock_request):
        response = await application_error_handler(mock_request, ApplicationError("boom"))

        assert response.status_code == 500
        assert _body(response)["error"] == "Internal server error"

    async def test_request_id_omitted_when_absent(self, mock_request):
        mock_request.headers = {}

        response = await application_error_handler(mock_request, NotFoundError())

        assert "request_id" not in _body(response)


class TestValidationErrorHandler:
    """Tests for validation_error_handler."""

    @pytest.fixture
    def mock_request(self):
        request = MagicMock(spec=Request)
        request.url.path = "/api/tasks"
        request.method = "POST"
        request.headers = {}
        request.state.request_id = "req-1"
        return request

    async def test_returns_400_with_field_details(self, mock_request):
        exc = RequestValidationError(
            [{"loc": ("body", "priority"), "msg": "Input should be less than or equal to 3", "type": "less_than_equal"}]
        )

        response = await validation_error_handler(mock_request, exc)

        assert response.status_code == 400
        body = _body(response)
        assert body["code"] == "VAL_REQUEST_INVALID"
        assert body["details"]["validation_errors"] == [
            {
                "field": "body.priority",
                "message": "Input should be less than or equal to 3",
                "type": "less_than_equal",
            }
        ]


class TestUnhandledExceptionHandler:
    """Tests for unhandled_exception_handler."""

    async def test_returns_generic_500(self):
        request = MagicMock(spec=Request)
        request.url.path = "/api/tasks"
        request.method = "GET"
        request.headers = {}
        del request.state.request_id

        response = await unhandled_exception_handler(request, RuntimeError("secret detail"))

        assert response.status_code == 500
        body = _body(response)
        assert body == {
            "success": False,
            "error": "An unexpected error occurred",
            "code": "SYS_INTERNAL_ERROR",
        }
