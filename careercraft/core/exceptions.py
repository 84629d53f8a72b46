"""
Domain exceptions.

Services raise these; the API layer translates them to HTTP responses
(see register_exception_handlers). Each class carries its status code
and a default user-facing message.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class CareerCraftError(Exception):
    status_code = 500
    default_message = "Something went wrong."

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ============================================================
# 4xx - caller errors
# ============================================================

class ValidationError(CareerCraftError):
    status_code = 400
    default_message = "Invalid input."


class InvalidState(CareerCraftError):
    status_code = 400
    default_message = "The resource is not in a state that allows this action."


class PreconditionFailed(CareerCraftError):
    status_code = 400
    default_message = "A required precondition was not met."


class InvalidOrExpiredToken(CareerCraftError):
    status_code = 400
    default_message = "Password reset token is invalid or has expired."


class InsufficientContent(CareerCraftError):
    status_code = 400
    default_message = "Not enough content to process."


class Unauthenticated(CareerCraftError):
    status_code = 401
    default_message = "Not authorized, no token."


class InvalidCredentials(Unauthenticated):
    default_message = "Invalid email or password."


class IdentityNotFound(Unauthenticated):
    default_message = "Not authorized, user not found."


class Forbidden(CareerCraftError):
    status_code = 403
    default_message = "You are not allowed to perform this action."


class NotFound(CareerCraftError):
    status_code = 404
    default_message = "Resource not found."


class Conflict(CareerCraftError):
    status_code = 409
    default_message = "Resource already exists."


class DuplicateIdentity(Conflict):
    default_message = "User already exists with this email."


# ============================================================
# 5xx - collaborator failures
# ============================================================

class UpstreamError(CareerCraftError):
    status_code = 500
    default_message = "An external service failed."


class UpstreamEmpty(UpstreamError):
    default_message = "AI did not return any content. The response was empty or blocked."


class ExtractionError(UpstreamError):
    default_message = "Failed to extract text from the resume."


class MalformedAiResponse(UpstreamError):
    default_message = "AI returned data in an unexpected format."


class StorageError(UpstreamError):
    default_message = "Could not store the uploaded file."


# ============================================================
# FastAPI wiring
# ============================================================

async def _domain_error_handler(request: Request, exc: CareerCraftError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path"))
        messages.append(f"{field}: {err.get('msg')}" if field else err.get("msg"))
    return JSONResponse(status_code=400, content={"detail": "; ".join(messages)})


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error."})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CareerCraftError, _domain_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
