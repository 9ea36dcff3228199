"""Registration form routes.

GET renders the form; POST runs the submission workflow. Every workflow
failure, including storage and notification failures after the input was
accepted, is answered with 400 and the failure reason.
"""
from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse
from fastapi.templating import Jinja2Templates

from intake.api.deps import get_context
from intake.core.context import ServiceContext
from intake.core.logging import get_logger
from intake.services.submission import process_submission

logger = get_logger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parents[2] / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter(prefix="/form", tags=["form"])


async def read_submitted_fields(request: Request) -> dict:
    """Accepts JSON bodies as well as urlencoded/multipart form posts."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        body = await request.json()
        return body if isinstance(body, dict) else {}

    form = await request.form()
    return dict(form)


@router.get("")
async def show_form(request: Request):
    return templates.TemplateResponse(request, "form.html", {"title": "Register"})


@router.post("", response_class=PlainTextResponse)
async def submit_form(request: Request, context: ServiceContext = Depends(get_context)):
    try:
        fields = await read_submitted_fields(request)
        result = await run_in_threadpool(
            process_submission,
            fields,
            context.store,
            context.notifier,
            context.settings.TELEGRAM_CHAT_ID,
        )
    except Exception as exc:
        logger.error(f"Error processing form: {exc}", exc_info=True)
        return PlainTextResponse(f"Error processing form: {exc}", status_code=400)

    if not result.ok:
        return PlainTextResponse(
            f"Error processing form: {result.error.message}",
            status_code=400,
        )

    return PlainTextResponse("User data successfully saved", status_code=200)
