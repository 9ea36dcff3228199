"""
Service context: the clients a request handler needs.

Built once when the application starts (or handed to create_app() directly,
e.g. in tests) and stored on app.state. Handlers read it through the
dependencies in intake.api.deps; nothing here is a module-level global.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Protocol

from firebase_admin import auth

from intake.core.config import Settings
from intake.core.firebase import init_firebase
from intake.core.logging import get_logger
from intake.services.telegram_notifier import TelegramNotifier
from intake.services.user_store import FirestoreUserStore

logger = get_logger(__name__)


class UserStore(Protocol):
    def put(self, key: str, record: Mapping[str, Any]) -> None: ...

    def get(self, key: str) -> Dict[str, Any]: ...

    def patch(self, key: str, partial: Mapping[str, Any]) -> None: ...


class Notifier(Protocol):
    def send(self, channel_id: str, text: str) -> Any: ...


@dataclass
class ServiceContext:
    settings: Settings
    store: UserStore
    notifier: Notifier
    # Firebase ID token -> decoded claims
    verify_token: Callable[[str], Dict[str, Any]] = auth.verify_id_token

    def close(self) -> None:
        close = getattr(self.notifier, "close", None)
        if close is not None:
            close()


def build_context(settings: Settings) -> ServiceContext:
    """Create the Firestore store and the Telegram notifier from settings."""
    db = init_firebase(settings.FIREBASE_CREDENTIALS)
    store = FirestoreUserStore(db, collection=settings.USERS_COLLECTION)

    notifier = TelegramNotifier(
        settings.TELEGRAM_BOT_TOKEN,
        api_base_url=settings.TELEGRAM_API_BASE_URL,
        timeout=settings.TELEGRAM_REQUEST_TIMEOUT,
    )
    if not notifier.is_configured():
        logger.warning("TELEGRAM_BOT_TOKEN is not set; form submissions will fail to notify")

    return ServiceContext(settings=settings, store=store, notifier=notifier)
