from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from intake.core.exceptions import IntakeError
from intake.core.logging import get_logger
from intake.core.middleware import SECURITY_HEADERS

logger = get_logger(__name__)


def add_exception_handlers(app: FastAPI):
    """
    Registers exception handlers so every failure leaves the HTTP layer as a
    status code plus a plain-text message.
    """

    @app.exception_handler(IntakeError)
    async def intake_exception_handler(request: Request, exc: IntakeError):
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return PlainTextResponse(
            str(exc.detail),
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(
            "Rejected request body on %s %s: %s",
            request.method,
            request.url.path,
            exc.errors(),
        )
        return PlainTextResponse("Invalid request body", status_code=400)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={"method": request.method, "url": str(request.url)},
            exc_info=True,
        )
        # Rendered outside the middleware stack, so headers are added here
        return PlainTextResponse(
            "Internal server error",
            status_code=500,
            headers=SECURITY_HEADERS,
        )
