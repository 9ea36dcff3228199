"""Direct read/update routes for stored user documents.

No field validation is applied to updates. Access is open unless
USER_ROUTES_REQUIRE_AUTH is enabled (see intake.api.deps).
"""
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, PlainTextResponse

from intake.api.deps import get_context, require_user_access
from intake.core.context import ServiceContext
from intake.core.exceptions import NotFound
from intake.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/user",
    tags=["users"],
    dependencies=[Depends(require_user_access)],
)


@router.get("/{user_id}")
def get_user(user_id: str, context: ServiceContext = Depends(get_context)):
    try:
        data = context.store.get(user_id)
    except NotFound:
        return PlainTextResponse("User not found", status_code=404)
    except Exception as exc:
        logger.error(f"Error fetching user data: {exc}", extra={"record_id": user_id}, exc_info=True)
        return PlainTextResponse("Error fetching user data", status_code=500)

    # createdAt comes back as a Firestore timestamp
    return JSONResponse(jsonable_encoder(data), status_code=200)


@router.put("/{user_id}", response_class=PlainTextResponse)
def update_user(
    user_id: str,
    updates: Dict[str, Any] = Body(...),
    context: ServiceContext = Depends(get_context),
):
    try:
        context.store.patch(user_id, updates)
    except NotFound:
        return PlainTextResponse("User not found", status_code=404)
    except Exception as exc:
        logger.error(f"Error updating user data: {exc}", extra={"record_id": user_id}, exc_info=True)
        return PlainTextResponse("Error updating user data", status_code=500)

    return PlainTextResponse("User data updated successfully", status_code=200)
