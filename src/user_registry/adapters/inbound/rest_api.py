"""FastAPI REST adapter for the User Registry.

Provides HTTP endpoints for creating, reading, replacing, deleting and
listing users. Every response body is a JSON envelope carrying either
``data`` or ``error``.

Usage:
    from user_registry.adapters.inbound.rest_api import create_app

    app = create_app()
    # Run with: uvicorn user_registry.adapters.inbound.rest_api:create_app --factory --port 8080

Endpoints:
    POST   /user       - Create a user
    GET    /user/{id}  - Get a user
    PUT    /user/{id}  - Replace all fields of a user
    DELETE /user/{id}  - Delete a user
    GET    /users      - List users
    GET    /health     - Health check
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictStr,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic_core import PydanticSerializationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from user_registry import __version__
from user_registry.domain.entities.user import User, UserDraft
from user_registry.domain.errors import (
    ErrorKind,
    MalformedPayloadError,
    PayloadTooLargeError,
    UserRegistryError,
)
from user_registry.domain.value_objects.identifiers import parse_user_id
from user_registry.infrastructure.config import get_config
from user_registry.infrastructure.container import get_container
from user_registry.infrastructure.logging import bind_request_context, get_logger
from user_registry.ports.inbound import UserServicePort

logger = get_logger("rest_api")

GENERIC_ERROR = "Something went wrong."
FALLBACK_BODY = b'{"error":"Something went wrong."}'
REQUEST_ID_HEADER = "X-Request-ID"

_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.INPUT_TOO_LARGE: 413,
    ErrorKind.MALFORMED_PAYLOAD: 422,
    ErrorKind.VALIDATION_FAILED: 400,
    ErrorKind.INVALID_IDENTIFIER: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.STORAGE_FAILURE: 500,
}


# Pydantic models for request/response serialization


class UserPayload(BaseModel):
    """Request body for create and replace.

    Missing and null fields decode as empty strings and are rejected
    later by length validation; a null body decodes as an empty object.
    Unknown fields, including ``id``, are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    first_name: StrictStr = ""
    last_name: StrictStr = ""
    biography: StrictStr = ""

    @model_validator(mode="before")
    @classmethod
    def null_body_as_empty(cls, data: object) -> object:
        return {} if data is None else data

    @field_validator("first_name", "last_name", "biography", mode="before")
    @classmethod
    def null_as_empty(cls, value: object) -> object:
        return "" if value is None else value

    def to_draft(self) -> UserDraft:
        return UserDraft(
            first_name=self.first_name,
            last_name=self.last_name,
            biography=self.biography,
        )


class UserResponse(BaseModel):
    """User record."""

    id: str
    first_name: str
    last_name: str
    biography: str

    @classmethod
    def from_user(cls, user: User) -> UserResponse:
        return cls(
            id=str(user.id),
            first_name=user.first_name,
            last_name=user.last_name,
            biography=user.biography,
        )


class UserEnvelope(BaseModel):
    """Envelope holding a single user."""

    data: UserResponse


class UserListEnvelope(BaseModel):
    """Envelope holding every user."""

    data: list[UserResponse] = Field(default_factory=list)


class ErrorEnvelope(BaseModel):
    """Envelope holding a client-safe error message."""

    error: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    storage: str
    version: str = __version__


def send_json(payload: BaseModel, status_code: int, *, is_fallback: bool = False) -> Response:
    """Encode a response model as JSON.

    If encoding fails, the failure is logged and a generic 500 error
    envelope is sent instead. The fallback path never recurses again.
    """
    try:
        content = payload.model_dump_json()
    except (PydanticSerializationError, ValueError, TypeError) as e:
        logger.error("response_encoding_failed", error=str(e))
        if is_fallback:
            return Response(
                content=FALLBACK_BODY,
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                media_type="application/json",
            )
        return send_json(
            ErrorEnvelope(error=GENERIC_ERROR),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            is_fallback=True,
        )

    return Response(content=content, status_code=status_code, media_type="application/json")


def status_for(error: UserRegistryError) -> int:
    """Map a domain error to its HTTP status code."""
    return _STATUS_BY_KIND.get(error.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)


async def read_user_draft(request: Request) -> UserDraft:
    """Read, size-check, decode and validate a user body.

    The body is streamed and rejected as soon as it grows past the
    configured limit, so oversized uploads are never fully buffered.
    Body checks complete before the path ID is looked at.

    Raises:
        PayloadTooLargeError: If the body exceeds the limit.
        MalformedPayloadError: If the body is not a JSON object with
            string fields.
        FieldLengthError: If a field violates its length bound.
    """
    limit: int = request.app.state.max_body_bytes

    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > limit:
        raise PayloadTooLargeError(limit)

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            raise PayloadTooLargeError(limit)

    try:
        payload = UserPayload.model_validate_json(bytes(body))
    except ValidationError as e:
        raise MalformedPayloadError(str(e)) from e

    draft = payload.to_draft()
    draft.validate()
    return draft


def create_app(
    service: UserServicePort | None = None,
    max_body_bytes: int | None = None,
) -> FastAPI:
    """Create FastAPI application with User Registry endpoints.

    Args:
        service: Optional user service. Defaults to the one built by the
            dependency injection container.
        max_body_bytes: Request body limit. Defaults to the configured
            ``server.max_body_bytes``.

    Returns:
        Configured FastAPI application.
    """
    if max_body_bytes is None:
        max_body_bytes = get_config().server.max_body_bytes
    if service is None:
        service = get_container().service

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("user_registry_started", storage_backend=service.backend_name)
        yield
        service.close()
        logger.info("user_registry_stopped")

    app = FastAPI(
        title="User Registry API",
        description="CRUD service for user records",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.max_body_bytes = max_body_bytes

    # Request ID and access logging
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = bind_request_context(request.headers.get(REQUEST_ID_HEADER))

        start = time.perf_counter()
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id

        logger.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return response

    # Error translation
    @app.exception_handler(UserRegistryError)
    async def handle_registry_error(request: Request, exc: UserRegistryError) -> Response:
        status_code = status_for(exc)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("request_failed", kind=exc.kind.value, error=repr(exc.__cause__))
        else:
            logger.info("request_rejected", kind=exc.kind.value, error=exc.message)
        return send_json(ErrorEnvelope(error=exc.message), status_code)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> Response:
        response = send_json(ErrorEnvelope(error=str(exc.detail)), exc.status_code)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        request: Request, exc: RequestValidationError
    ) -> Response:
        return send_json(ErrorEnvelope(error="Invalid request."), status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> Response:
        logger.exception("unhandled_error", error=repr(exc))
        return send_json(
            ErrorEnvelope(error=GENERIC_ERROR), status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    # Health endpoint
    @app.get("/health", response_model=HealthResponse, tags=["System"])
    def health_check():
        """Check storage backend reachability."""
        if service.is_healthy():
            return send_json(
                HealthResponse(status="healthy", storage=service.backend_name),
                status.HTTP_200_OK,
            )
        return send_json(
            HealthResponse(status="unhealthy", storage=service.backend_name),
            status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    # User endpoints
    @app.post(
        "/user",
        response_model=UserEnvelope,
        status_code=status.HTTP_201_CREATED,
        tags=["Users"],
    )
    def create_user(draft: UserDraft = Depends(read_user_draft)):
        """Create a new user."""
        user = service.create_user(draft)
        return send_json(
            UserEnvelope(data=UserResponse.from_user(user)), status.HTTP_201_CREATED
        )

    @app.get("/user/{user_id}", response_model=UserEnvelope, tags=["Users"])
    def get_user(user_id: str):
        """Get a user by ID."""
        user = service.get_user(parse_user_id(user_id))
        return send_json(UserEnvelope(data=UserResponse.from_user(user)), status.HTTP_200_OK)

    @app.put("/user/{user_id}", response_model=UserEnvelope, tags=["Users"])
    def replace_user(user_id: str, draft: UserDraft = Depends(read_user_draft)):
        """Replace every field of an existing user."""
        user = service.replace_user(parse_user_id(user_id), draft)
        return send_json(UserEnvelope(data=UserResponse.from_user(user)), status.HTTP_200_OK)

    @app.delete("/user/{user_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["Users"])
    def delete_user(user_id: str):
        """Delete a user."""
        service.delete_user(parse_user_id(user_id))
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/users", response_model=UserListEnvelope, tags=["Users"])
    def list_users():
        """List all users."""
        return send_json(
            UserListEnvelope(data=[UserResponse.from_user(u) for u in service.list_users()]),
            status.HTTP_200_OK,
        )

    return app
