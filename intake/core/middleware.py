"""
intake/core/middleware.py

Cross-cutting HTTP middleware:

- Per-client fixed-window rate limiting
- Security response headers
- Combined-format access log
"""

import time
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple

from fastapi import Request
from fastapi.responses import PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware

from intake.core.logging import get_logger

access_logger = get_logger("intake.access")
logger = get_logger(__name__)

SECURITY_HEADERS = {
    "Content-Security-Policy": (
        "default-src 'self';base-uri 'self';font-src 'self' https: data:;"
        "form-action 'self';frame-ancestors 'self';img-src 'self' data:;"
        "object-src 'none';script-src 'self';script-src-attr 'none';"
        "style-src 'self' https: 'unsafe-inline';upgrade-insecure-requests"
    ),
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}

RATE_LIMIT_MESSAGE = "Too many requests, please try again later."


class FixedWindowRateLimiter:
    """
    Counts hits per key in fixed windows of `window_seconds`.

    State is in-memory and per-process: several workers each keep their own
    counters.
    """

    def __init__(self, max_requests: int, window_seconds: int):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        # key -> (window_start, hits)
        self._windows: Dict[str, Tuple[float, int]] = {}

    def hit(self, key: str, now: Optional[float] = None) -> Tuple[bool, int, int]:
        """
        Records one request for `key`.

        Returns:
            (allowed, remaining, seconds_until_reset)
        """
        now = time.monotonic() if now is None else now
        window_start, hits = self._windows.get(key, (now, 0))

        if now - window_start >= self.window_seconds:
            window_start, hits = now, 0

        hits += 1
        self._windows[key] = (window_start, hits)
        self._prune(now)

        reset_in = max(0, int(round(window_start + self.window_seconds - now)))
        remaining = max(0, self.max_requests - hits)
        return hits <= self.max_requests, remaining, reset_in

    def _prune(self, now: float) -> None:
        expired = [
            key for key, (start, _) in self._windows.items()
            if now - start >= self.window_seconds
        ]
        for key in expired:
            del self._windows[key]


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, limiter: FixedWindowRateLimiter):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next):
        client = request.client.host if request.client else "unknown"
        allowed, remaining, reset_in = self.limiter.hit(client)

        headers = {
            "RateLimit-Limit": str(self.limiter.max_requests),
            "RateLimit-Remaining": str(remaining),
            "RateLimit-Reset": str(reset_in),
        }

        if not allowed:
            logger.warning(f"Rate limit exceeded for {client}")
            return PlainTextResponse(
                RATE_LIMIT_MESSAGE,
                status_code=429,
                headers={**headers, "Retry-After": str(reset_in)},
            )

        response = await call_next(request)
        response.headers.update(headers)
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Logs one Apache "combined" line per request."""

    async def dispatch(self, request: Request, call_next):
        try:
            response = await call_next(request)
        except Exception:
            # Rendered as a 500 by the catch-all handler outside this middleware
            self._log(request, 500, "-")
            raise

        self._log(request, response.status_code, response.headers.get("content-length", "-"))
        return response

    def _log(self, request: Request, status_code: int, length: str) -> None:
        client = request.client.host if request.client else "-"
        timestamp = datetime.now(timezone.utc).strftime("%d/%b/%Y:%H:%M:%S %z")
        target = request.url.path
        if request.url.query:
            target += f"?{request.url.query}"
        request_line = f"{request.method} {target} HTTP/{request.scope.get('http_version', '1.1')}"

        access_logger.info(
            '%s - - [%s] "%s" %s %s "%s" "%s"',
            client,
            timestamp,
            request_line,
            status_code,
            length,
            request.headers.get("referer", "-"),
            request.headers.get("user-agent", "-"),
        )
