"""
API dependencies.

Hands the service context to route handlers and, when enabled, verifies
Firebase ID tokens on the /user routes.
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from intake.core.context import ServiceContext

# auto_error=False so the open (default) mode accepts requests without a header
security = HTTPBearer(auto_error=False)


def get_context(request: Request) -> ServiceContext:
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise HTTPException(status_code=503, detail="Service is starting up")
    return context


def require_user_access(
    context: ServiceContext = Depends(get_context),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
):
    """
    Gate for the direct read/update routes.

    Open unless USER_ROUTES_REQUIRE_AUTH is set; then expects
        Authorization: Bearer <firebase id_token>
    and returns the decoded claims.
    """
    if not context.settings.USER_ROUTES_REQUIRE_AUTH:
        return None

    if credentials is None:
        raise HTTPException(
            status_code=401,
            detail="Missing ID token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return context.verify_token(credentials.credentials)
    except Exception as exc:
        raise HTTPException(
            status_code=401,
            detail="Invalid ID token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
