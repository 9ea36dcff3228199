# intake/core/config.py
from __future__ import annotations

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    # Firestore (service-account JSON path)
    FIREBASE_CREDENTIALS: str = "intake/core/firebase_key.json"
    USERS_COLLECTION: str = "userdata"

    # Telegram bot
    TELEGRAM_BOT_TOKEN: str = ""
    TELEGRAM_CHAT_ID: str = ""
    TELEGRAM_API_BASE_URL: str = "https://api.telegram.org"
    TELEGRAM_REQUEST_TIMEOUT: float = 10.0
    TELEGRAM_WEBHOOK_URL: str = ""
    TELEGRAM_WEBHOOK_SECRET: str = ""

    # 100 requests per client per 15 minutes
    RATE_LIMIT_MAX_REQUESTS: int = 100
    RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60

    CORS_ORIGINS: List[str] = ["*"]

    # /user/{id} routes are open unless this is switched on
    USER_ROUTES_REQUIRE_AUTH: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()
