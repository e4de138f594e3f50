"""Tests for global exception handlers.

Validates that all exception types are handled consistently with
proper HTTP status codes, error format, and no information leakage.
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel

from app.core.errors import (
    AppError,
    AuthenticationAppError,
    AuthorizationAppError,
    NotFoundAppError,
    ServiceUnavailableAppError,
    UpstreamAppError,
    ValidationAppError,
)
from app.core.exception_handlers import setup_exception_handlers


@pytest.fixture
def app_with_handlers() -> FastAPI:
    """Create FastAPI app with exception handlers registered."""
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    """Create test client with handlers enabled."""
    return TestClient(app_with_handlers, raise_server_exceptions=False)


class TestAppErrorHandler:
    """Test handler for AppError and subclasses."""

    def test_validation_error_returns_400(self, client: TestClient, app_with_handlers: FastAPI):
        """Verify ValidationAppError returns HTTP 400."""
        @app_with_handlers.get("/test-validation")
        async def test_endpoint():
            raise ValidationAppError(
                code="invalid_request",
                message="Missing required field: reviewId"
            )

        response = client.get("/test-validation")

        assert response.status_code == 400
        data = response.json()
        assert data["error"]["code"] == "invalid_request"
        assert data["error"]["message"] == "Missing required field: reviewId"
        assert "request_id" in data["error"]

    def test_error_includes_details(self, client: TestClient, app_with_handlers: FastAPI):
        """Verify details are passed through when provided."""
        @app_with_handlers.get("/test-details")
        async def test_endpoint():
            raise UpstreamAppError(
                code="notification_rejected",
                message="Notification endpoint rejected the request",
                details={"http_status": 403},
            )

        response = client.get("/test-details")

        assert response.status_code == 500
        assert response.json()["error"]["details"] == {"http_status": 403}

    @pytest.mark.parametrize(
        "error_type, expected_status",
        [
            (AuthenticationAppError, 401),
            (AuthorizationAppError, 403),
            (NotFoundAppError, 404),
            (ServiceUnavailableAppError, 500),
        ],
    )
    def test_error_class_maps_to_status(
        self, client: TestClient, app_with_handlers: FastAPI, error_type, expected_status
    ):
        @app_with_handlers.get("/test-status")
        async def test_endpoint():
            raise error_type(code="some_code", message="Some message")

        response = client.get("/test-status")

        assert response.status_code == expected_status
        assert response.json()["error"]["code"] == "some_code"


class TestRequestValidationHandler:
    def test_body_validation_returns_400_not_422(self, client: TestClient, app_with_handlers: FastAPI):
        class Payload(BaseModel):
            name: str

        @app_with_handlers.post("/test-body")
        async def test_endpoint(payload: Payload):
            return {"ok": True}

        response = client.post("/test-body", json={})

        assert response.status_code == 400
        data = response.json()
        assert data["error"]["code"] == "invalid_request"
        assert data["error"]["details"]["context"]["fields"] == ["body.name"]


class TestGeneralExceptionHandler:
    """Test fallback handler for unexpected exceptions."""

    def test_unexpected_exception_handler_registered(self, app_with_handlers: FastAPI):
        """Verify fallback exception handler is registered."""
        assert Exception in app_with_handlers.exception_handlers

    def test_general_exception_handler_logic(self):
        """Verify general_exception_handler returns correct structure."""
        from app.core.exception_handlers import general_exception_handler

        request = AsyncMock()
        request.url.path = "/test"
        request.method = "POST"

        exc = RuntimeError("Unexpected error: connection to storage failed")
        response = asyncio.run(general_exception_handler(request, exc))

        data = json.loads(bytes(response.body).decode())
        assert response.status_code == 500
        assert data["error"]["code"] == "internal_server_error"
        assert "storage" not in data["error"]["message"]
        assert "request_id" in data["error"]
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    def test_general_exception_handler_never_leaks_stack_trace(self):
        """Verify stack traces are never included in response."""
        from app.core.exception_handlers import general_exception_handler

        request = AsyncMock()
        request.url.path = "/test"
        request.method = "GET"

        exc = ValueError("Test error with details")
        response = asyncio.run(general_exception_handler(request, exc))

        response_text = bytes(response.body).decode()
        assert "Traceback" not in response_text
        assert "File \"" not in response_text
        assert "ValueError" not in response_text


class TestErrorHandlerIntegration:
    """Integration tests for exception handler setup."""

    def test_setup_exception_handlers_registers_handlers(self, app_with_handlers: FastAPI):
        assert AppError in app_with_handlers.exception_handlers
        assert Exception in app_with_handlers.exception_handlers

    def test_multiple_handler_setups_does_not_fail(self):
        """Verify calling setup_exception_handlers multiple times is safe."""
        app = FastAPI()

        setup_exception_handlers(app)
        setup_exception_handlers(app)

        assert AppError in app.exception_handlers
