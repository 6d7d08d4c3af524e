"""Custom exceptions and centralized FastAPI error handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class CreatorApiError(Exception):
    """Base exception with HTTP status code and optional response headers."""

    def __init__(self, message: str, status_code: int = 500, headers: dict[str, str] | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.headers = headers


class RateLimitExceededError(CreatorApiError):
    def __init__(self, retry_after: float):
        super().__init__(
            "Too many requests, please try again later.",
            status_code=429,
            headers={"Retry-After": str(max(1, int(round(retry_after))))},
        )
        self.retry_after = retry_after


class ServiceNotConfiguredError(CreatorApiError):
    def __init__(self, feature: str, missing: str):
        super().__init__(f"{feature} unavailable: {missing} is not configured", status_code=503)


class SubmissionError(CreatorApiError):
    def __init__(self):
        super().__init__("Internal Server Error", status_code=500)


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(CreatorApiError)
    async def handle_creator_api_error(_request: Request, exc: CreatorApiError):
        return JSONResponse({"error": str(exc)}, status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(ValueError)
    async def handle_value_error(_request: Request, exc: ValueError):
        return JSONResponse({"error": str(exc)}, status_code=400)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(
            {"error": "Internal server error"},
            status_code=500,
        )
