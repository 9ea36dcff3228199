"""Telegram bot webhook.

Answers the /start and /help commands; every other update is acknowledged
and ignored.
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Header, HTTPException
from fastapi.concurrency import run_in_threadpool

from intake.api.deps import get_context
from intake.core.context import ServiceContext
from intake.core.exceptions import DeliveryError
from intake.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/bot", tags=["bot"])

COMMAND_REPLIES = {
    "start": "Welcome to our bot!",
    "help": "This bot notifies about new user registrations.",
}


def parse_command(text: str) -> Optional[str]:
    """'/help@my_bot extra' -> 'help'. Returns None for non-commands."""
    if not text or not text.startswith("/"):
        return None
    parts = text[1:].split(maxsplit=1)
    command = parts[0] if parts else ""
    return command.split("@", 1)[0].lower() or None


@router.post("/webhook")
async def telegram_webhook(
    update: Dict[str, Any] = Body(...),
    secret_token: Optional[str] = Header(None, alias="X-Telegram-Bot-Api-Secret-Token"),
    context: ServiceContext = Depends(get_context),
):
    expected = context.settings.TELEGRAM_WEBHOOK_SECRET
    if expected and secret_token != expected:
        raise HTTPException(status_code=403, detail="Invalid webhook secret")

    # Malformed updates are acknowledged like any other non-command
    message = update.get("message")
    if not isinstance(message, dict):
        message = {}
    chat = message.get("chat")
    chat_id = chat.get("id") if isinstance(chat, dict) else None
    text = message.get("text")
    reply = COMMAND_REPLIES.get(parse_command(text if isinstance(text, str) else ""))

    if reply and chat_id is not None:
        try:
            await run_in_threadpool(context.notifier.send, str(chat_id), reply)
        except DeliveryError as exc:
            # Telegram would redeliver the update on a non-2xx answer
            logger.error(f"Failed to answer bot command: {exc.message}")

    return {"ok": True}
