import logging
from typing import Optional

from pydantic import ValidationError
from pydantic_settings import BaseSettings

from app.errors import InvalidConfiguration

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    # Telegram bot credentials, both required when a submission is relayed
    telegram_token: str = ""
    telegram_chat_id: str = ""

    telegram_api_base: str = "https://api.telegram.org"
    # Seconds; unset means wait for the transport to resolve or fail
    telegram_timeout: Optional[float] = None

    app_name: str = "SendTelegram"
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}

    def missing_credentials(self) -> list[str]:
        missing = []
        if not self.telegram_token:
            missing.append("TELEGRAM_TOKEN")
        if not self.telegram_chat_id:
            missing.append("TELEGRAM_CHAT_ID")
        return missing


def get_settings() -> Settings:
    """Build settings from the current environment. Not cached: every request sees fresh values."""
    try:
        return Settings()
    except ValidationError as exc:
        invalid = [str(err["loc"][0]).upper() for err in exc.errors() if err.get("loc")]
        logger.error("Invalid env vars: %s", ", ".join(invalid))
        raise InvalidConfiguration(invalid) from exc
