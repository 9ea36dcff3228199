"""
intake/main.py

Application entry point: builds the FastAPI app, wires middleware, routes
and exception handlers, and owns the service context lifecycle.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles

from intake.api.routes import bot, form, users
from intake.core.config import Settings, settings as default_settings
from intake.core.context import ServiceContext, build_context
from intake.core.errors import add_exception_handlers
from intake.core.exceptions import DeliveryError
from intake.core.logging import get_logger, setup_logging
from intake.core.middleware import (
    AccessLogMiddleware,
    FixedWindowRateLimiter,
    RateLimitMiddleware,
    SecurityHeadersMiddleware,
)

logger = get_logger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


def create_app(
    settings: Optional[Settings] = None,
    context: Optional[ServiceContext] = None,
) -> FastAPI:
    """
    Build the application.

    With no `context`, the Firestore and Telegram clients are created at
    startup from `settings` and released at shutdown. Passing a context
    (tests, embedding) skips that and uses it as-is.
    """
    settings = settings or (context.settings if context else default_settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_context = getattr(app.state, "context", None) is None
        if owns_context:
            setup_logging(settings.LOG_LEVEL)
            app.state.context = build_context(settings)
            if settings.TELEGRAM_WEBHOOK_URL:
                try:
                    app.state.context.notifier.set_webhook(
                        settings.TELEGRAM_WEBHOOK_URL,
                        settings.TELEGRAM_WEBHOOK_SECRET,
                    )
                except DeliveryError as exc:
                    logger.error(f"Bot webhook not registered: {exc.message}")
        logger.info("Registration intake service started")

        yield

        if owns_context:
            app.state.context.close()
            app.state.context = None
        logger.info("Registration intake service stopped")

    app = FastAPI(title="Registration Intake Service", lifespan=lifespan)
    app.state.context = context

    # Added innermost first: 429s still get CORS/security headers and a log line
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        RateLimitMiddleware,
        limiter=FixedWindowRateLimiter(
            settings.RATE_LIMIT_MAX_REQUESTS,
            settings.RATE_LIMIT_WINDOW_SECONDS,
        ),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept", "Authorization"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(AccessLogMiddleware)

    add_exception_handlers(app)

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "Welcome to our application!"

    @app.get("/health")
    async def health_check():
        return {"status": "ok"}

    app.include_router(form.router)
    app.include_router(users.router)
    app.include_router(bot.router)
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    return app


app = create_app()


def run():
    import uvicorn

    uvicorn.run(
        "intake.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        log_level=default_settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
