import pytest
from fastapi.testclient import TestClient

from intake.core.config import Settings
from intake.core.context import ServiceContext
from intake.main import create_app
from tests.fakes import FakeNotifier, InMemoryUserStore

CHAT_ID = "-100123456"


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        TELEGRAM_BOT_TOKEN="123:test-token",
        TELEGRAM_CHAT_ID=CHAT_ID,
    )


@pytest.fixture
def store():
    return InMemoryUserStore()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def make_client(settings, store, notifier):
    """Builds a TestClient around fakes; keyword args override settings/clients."""

    def _make(settings_overrides=None, **context_overrides):
        app_settings = settings.model_copy(update=settings_overrides or {})
        context = ServiceContext(
            settings=app_settings,
            store=context_overrides.get("store", store),
            notifier=context_overrides.get("notifier", notifier),
            verify_token=context_overrides.get("verify_token", lambda token: {"uid": token}),
        )
        return TestClient(create_app(app_settings, context))

    return _make


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def valid_payload():
    return {
        "id": "u1",
        "name": "Ann",
        "email": "ann@x.com",
        "mobile": "+14155550100",
        "checkbox1": True,
    }
