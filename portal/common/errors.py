"""
Exception types raised by the portal services and turned into HTTP responses
by the routers.
"""
from typing import Dict, List, Optional

from fastapi.responses import JSONResponse


class PortalError(Exception):
    """Base class for errors that map onto a specific HTTP status."""
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_content(self) -> dict:
        return {"message": self.message}


class ValidationError(PortalError):
    """Malformed or missing input fields."""
    status_code = 400
    default_message = "Invalid payload"

    def __init__(self, message: Optional[str] = None, errors: Optional[Dict[str, List[str]]] = None):
        super().__init__(message)
        self.errors = errors or {}

    def to_content(self) -> dict:
        content = super().to_content()
        if self.errors:
            content["errors"] = self.errors
        return content


class InvalidIdError(ValidationError):
    default_message = "Invalid product id"


class NotFoundError(PortalError):
    status_code = 404
    default_message = "Product not found"


class AuthError(PortalError):
    status_code = 401
    default_message = "Unauthorized"


class ConfigError(PortalError):
    """
    Required server configuration is missing. The message names the missing
    environment variables since it is meant for the operator.
    """
    status_code = 500
    default_message = "Server configuration is incomplete"

    def __init__(self, missing_keys: List[str], subject: str = "Server environment variables"):
        self.missing_keys = list(missing_keys)
        super().__init__(f"{subject} are missing: {', '.join(self.missing_keys)}")


class StoreFailure(PortalError):
    """The document store could not complete an operation."""
    status_code = 500
    default_message = "Product store operation failed"


def error_response(exc: PortalError) -> JSONResponse:
    """Render a PortalError as a JSON response with its status code."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_content())


def field_errors_from_pydantic(errors: list) -> Dict[str, List[str]]:
    """
    Collapse pydantic error entries into a ``{field: [messages]}`` map.

    The ``body`` / ``query`` / ``path`` prefix FastAPI adds to ``loc`` is dropped
    so the keys are plain field names. Errors about the payload as a whole are
    keyed ``_schema``.
    """
    field_errors: Dict[str, List[str]] = {}
    for error in errors:
        loc = [part for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = str(loc[0]) if loc and error.get("type") != "json_invalid" else "_schema"
        message = error.get("msg", "Invalid value")
        # pydantic prefixes custom ValueError messages
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        field_errors.setdefault(field, []).append(message)
    return field_errors
