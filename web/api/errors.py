"""API errors and validation helpers."""

from typing import TypeVar

import pydantic

M = TypeVar("M", bound=pydantic.BaseModel)


class ApiError(Exception):
    """Base for errors shown to the user."""

    status_code = 500

    def __init__(self, message: str = "Internal error"):
        self.message = message
        super().__init__(self.message)


class NotFoundError(ApiError):
    """Resource not found."""

    status_code = 404

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)


class UnauthorizedError(ApiError):
    """Missing or invalid creator token."""

    status_code = 403

    def __init__(self, message: str = "Permission denied"):
        super().__init__(message)


class ValidationError(ApiError):
    """Validation error."""

    status_code = 400

    def __init__(self, message: str = "Validation error"):
        super().__init__(message)


class UpstreamUnavailableError(ApiError):
    """Catalog failure; the request can be retried later."""

    status_code = 503

    def __init__(self, message: str = "Catalog is unavailable, please try again later"):
        super().__init__(message)


def validate_payload(model: type[M], payload: dict | None) -> M:
    """Parse a request body into ``model`` or raise ValidationError."""
    try:
        return model.model_validate(payload or {})
    except pydantic.ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) or "body" for err in e.errors())
        raise ValidationError(f"Invalid request: {fields}") from e


def validate_username(username: str | None) -> str:
    """Non-empty, trimmed username."""
    if not username or not username.strip():
        raise ValidationError("Username is required")
    return username.strip()
