# app/core/exceptions.py
import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong, please try again"
NOT_AUTHORIZED_MESSAGE = "You are not authorized to perform this action"


class ValidationError(HTTPException):
    def __init__(self, detail: str = "Invalid request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Data not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class PermissionDeniedError(HTTPException):
    def __init__(self, detail: str = NOT_AUTHORIZED_MESSAGE):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class ConflictError(HTTPException):
    def __init__(self, detail: str = "Request conflicts with the current state"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class UpstreamError(HTTPException):
    def __init__(self, detail: str = "Upstream service failed"):
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)


class ConfigurationError(HTTPException):
    def __init__(self, detail: str = "Service is not configured"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


class UploadTimeoutError(HTTPException):
    def __init__(self, detail: str = "Upload timed out, please try again"):
        super().__init__(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=detail)


def error_message(exc: Exception, fallback: str = GENERIC_ERROR_MESSAGE) -> str:
    """Turn any exception into the message shown to the user."""
    if isinstance(exc, HTTPException):
        if exc.status_code == status.HTTP_403_FORBIDDEN:
            return NOT_AUTHORIZED_MESSAGE
        if isinstance(exc.detail, str) and exc.detail:
            return exc.detail
        return fallback
    return fallback


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": error_message(exc)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(Exception, unhandled_exception_handler)
