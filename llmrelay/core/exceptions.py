from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class RelayError(Exception):
    """Base exception for relay API errors."""

    def __init__(
        self,
        code: str,
        message: str,
        status: int = 500,
        details: dict | None = None,
    ):
        self.code = code
        self.message = message
        self.status = status
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        result = {
            "error": {
                "code": self.code,
                "message": self.message,
                "status": self.status,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result


class ValidationError(RelayError):
    def __init__(self, message: str = "Invalid request.", details: dict | None = None):
        super().__init__(code="validation_error", message=message, status=400, details=details)


class NotFoundError(RelayError):
    def __init__(self, message: str = "Resource not found.", details: dict | None = None):
        super().__init__(code="not_found", message=message, status=404, details=details)


class ConflictError(RelayError):
    def __init__(self, message: str = "Resource already exists.", details: dict | None = None):
        super().__init__(code="conflict", message=message, status=409, details=details)


class AuthenticationError(RelayError):
    def __init__(self, message: str = "Invalid credentials.", details: dict | None = None):
        super().__init__(code="authentication_failed", message=message, status=401, details=details)


# ── Dispatch errors ─────────────────────────────────────────────────────────


class ProviderNotFoundError(RelayError):
    def __init__(self, provider_name: str):
        super().__init__(
            code="provider_not_found",
            message=f"Provider '{provider_name}' is not registered.",
            status=404,
            details={"provider": provider_name},
        )


class ModelNotSupportedError(RelayError):
    def __init__(self, provider_name: str, model: str, supported: list[str] | None = None):
        super().__init__(
            code="model_not_supported",
            message=f"Model '{model}' is not supported by provider '{provider_name}'.",
            status=400,
            details={"provider": provider_name, "model": model, "supported_models": supported or []},
        )


class CredentialNotFoundError(RelayError):
    def __init__(self, message: str = "API key not found for the selected provider.", details: dict | None = None):
        super().__init__(code="credential_not_found", message=message, status=404, details=details)


class ConversationNotFoundError(RelayError):
    def __init__(self, conversation_id: str):
        super().__init__(
            code="conversation_not_found",
            message=f"Conversation {conversation_id} not found.",
            status=404,
            details={"conversation_id": conversation_id},
        )


class ProviderTemplateError(RelayError):
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(code="provider_template_invalid", message=message, status=500, details=details)


class ProviderCallFailedError(RelayError):
    def __init__(
        self,
        message: str,
        upstream_status: int | None = None,
        upstream_message: str | None = None,
    ):
        details = {}
        if upstream_status is not None:
            details["upstream_status"] = upstream_status
        if upstream_message:
            details["upstream_message"] = upstream_message
        super().__init__(code="provider_call_failed", message=message, status=502, details=details)
        self.upstream_status = upstream_status
        self.upstream_message = upstream_message


class ProviderResponseMalformedError(RelayError):
    def __init__(self, message: str = "Provider returned an unrecognized response.", details: dict | None = None):
        super().__init__(code="provider_response_malformed", message=message, status=502, details=details)


class StoreIOError(RelayError):
    def __init__(self, message: str = "Failed to access the record store.", details: dict | None = None):
        super().__init__(code="store_io_error", message=message, status=500, details=details)


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    """Global exception handler for RelayError and subclasses."""
    return JSONResponse(status_code=exc.status, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render pydantic request validation failures in the RelayError envelope."""
    fields = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        fields.append({"field": ".".join(loc), "message": err.get("msg", "")})
    error = ValidationError("Missing or invalid request fields.", details={"fields": fields})
    return JSONResponse(status_code=error.status, content=error.to_dict())
