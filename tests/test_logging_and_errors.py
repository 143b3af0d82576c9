"""Tests for logging and error handling."""

import uuid

import pytest
import structlog
from httpx import AsyncClient

from speednet.core.errors import (
    AppError,
    AuthorizationError,
    ConflictError,
    ErrorDetail,
    NotFoundError,
    ValidationError,
)
from speednet.core.logging import (
    bind_log_context,
    get_request_id,
    resolve_log_level,
    set_request_id,
)
from speednet.core.sentry import _filter_sensitive_data
from speednet.core.validation import parse_payload
from speednet.models.signup_schemas import SignupUpdate


class TestErrorClasses:
    """Test custom exception classes."""

    def test_validation_error_creates_correct_response(self):
        """Test ValidationError converts to proper response."""
        exc = ValidationError("Invalid email", details={"field": "email"})

        assert exc.code == "VALIDATION_ERROR"
        assert exc.status_code == 422
        assert exc.details == {"field": "email"}

        response = exc.to_response()
        assert isinstance(response, ErrorDetail)
        assert response.code == "VALIDATION_ERROR"

    def test_not_found_error_includes_resource_context(self):
        """Test NotFoundError includes resource details."""
        exc = NotFoundError(resource="NetworkingSession", resource_id="123")

        assert exc.code == "NOT_FOUND"
        assert exc.status_code == 404
        assert exc.message == "NetworkingSession with ID 123 not found"
        assert exc.details["resource"] == "NetworkingSession"
        assert exc.details["resource_id"] == "123"

    def test_not_found_accepts_uuid_ids(self):
        session_id = uuid.uuid4()
        exc = NotFoundError(resource="NetworkingSession", resource_id=session_id)

        assert exc.details["resource_id"] == str(session_id)

    def test_conflict_and_authorization_errors(self):
        assert ConflictError("taken").status_code == 409
        forbidden = AuthorizationError()
        assert forbidden.status_code == 403
        assert forbidden.code == "FORBIDDEN"
        assert forbidden.message == "Forbidden"

    def test_empty_details_are_omitted(self):
        """Test AppError without details renders details=None."""
        exc = AppError(code="BOOM", message="boom")
        assert exc.to_response().details is None


class TestParsePayload:
    """Test boundary parsing into domain errors."""

    def test_unknown_field_becomes_validation_error(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_payload(SignupUpdate, {"status": "removed", "vip": True})

        assert exc_info.value.details["errors"][0]["field"] == "vip"

    def test_parsed_instance_passes_through(self):
        patch = SignupUpdate(status="removed")
        assert parse_payload(SignupUpdate, patch) is patch

    def test_none_is_empty_payload(self):
        assert parse_payload(SignupUpdate, None).model_fields_set == set()


class TestRequestId:
    """Test request ID propagation."""

    def test_set_and_get_request_id(self):
        set_request_id("req-123")
        assert get_request_id() == "req-123"

    def test_bind_log_context_skips_none(self):
        structlog.contextvars.clear_contextvars()

        bind_log_context(actor_id="7", path="/health", method=None)

        assert structlog.contextvars.get_contextvars() == {"actor_id": "7", "path": "/health"}
        structlog.contextvars.clear_contextvars()

    async def test_request_id_echoed(self, client: AsyncClient):
        response = await client.get("/health", headers={"X-Request-ID": "trace-abc"})
        assert response.headers["x-request-id"] == "trace-abc"

    async def test_request_id_generated(self, client: AsyncClient):
        response = await client.get("/health")
        assert len(response.headers["x-request-id"]) == 36


class TestErrorResponses:
    """Test exception handler output."""

    async def test_app_error_rendered_as_json(self, client: AsyncClient):
        response = await client.patch(
            "/networking/business-cards/00000000-0000-0000-0000-000000000000",
            json={"title": "Ghost"},
        )

        assert response.status_code == 404
        body = response.json()
        assert body["code"] == "NOT_FOUND"
        assert body["details"]["resource"] == "BusinessCard"

    async def test_unknown_route_keeps_detail_shape(self, client: AsyncClient):
        response = await client.get("/nowhere")

        assert response.status_code == 404
        assert response.json() == {"detail": "Not Found"}


class TestSentryScrubbing:
    """Test participant data is dropped before events leave the process."""

    def test_contact_extras_and_sql_breadcrumbs_dropped(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        event = {
            "extra": {
                "participant_email": "ada@example.com",
                "join_url": "https://video.example.com/room/1",
                "session_id": "abc",
            },
            "breadcrumbs": {
                "values": [
                    {"message": "sqlalchemy: SELECT * FROM networking_session_signups"},
                    {"message": "signup.registered"},
                ]
            },
        }

        scrubbed = _filter_sensitive_data(event, {})

        assert scrubbed["extra"] == {"session_id": "abc"}
        assert scrubbed["breadcrumbs"]["values"] == [{"message": "signup.registered"}]

    def test_test_environment_is_left_alone(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "test")
        event = {"extra": {"participant_email": "ada@example.com"}}

        assert _filter_sensitive_data(event, {}) == event


class TestLogLevel:
    """Test LOG_LEVEL resolution."""

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert resolve_log_level("warning") == "WARNING"

    def test_env_level_used(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", " debug ")
        assert resolve_log_level() == "DEBUG"

    def test_unknown_level_falls_back_to_info(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        assert resolve_log_level() == "INFO"
        assert resolve_log_level("chatty") == "INFO"
