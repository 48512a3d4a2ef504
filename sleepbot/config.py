"""Configuration management for the sleep survey bot."""

import os

from dotenv import load_dotenv


class Settings:
    """Simple settings class."""

    def __init__(self) -> None:
        load_dotenv()

        # Telegram Bot
        self.telegram_bot_token: str = os.getenv("TELEGRAM_BOT_TOKEN", "")
        self.telegram_webhook_url: str = os.getenv("TELEGRAM_WEBHOOK_URL", "")
        self.telegram_webhook_secret: str = os.getenv("TELEGRAM_WEBHOOK_SECRET", "webhook_secret")
        self.webhook_path: str = os.getenv("WEBHOOK_PATH", "/telegram/webhook")

        # Prediction service
        self.prediction_api_url: str = os.getenv("PREDICTION_API_URL", "http://127.0.0.1:5000/predict")
        self.prediction_health_url: str = os.getenv(
            "PREDICTION_HEALTH_URL",
            self._derive_health_url(self.prediction_api_url),
        )
        self.prediction_healthcheck_enabled: bool = (
            os.getenv("PREDICTION_HEALTHCHECK_ENABLED", "false").lower() == "true"
        )
        self.prediction_timeout: float = float(os.getenv("PREDICTION_TIMEOUT", "10"))

        # Survey sessions
        self.survey_max_sessions: int = int(os.getenv("SURVEY_MAX_SESSIONS", "10000"))

        # Application
        self.debug: bool = os.getenv("DEBUG", "true").lower() == "true"
        self.log_level: str = os.getenv("LOG_LEVEL", "DEBUG")

    def _derive_health_url(self, api_url: str) -> str:
        """Derive the health probe URL that sits next to the predict endpoint."""
        if not api_url:
            return ""

        base, _, _ = api_url.rstrip("/").rpartition("/")
        return f"{base}/health" if base else ""

    @property
    def webhook_enabled(self) -> bool:
        """Return True when updates arrive through the webhook endpoint."""
        return not self.debug and bool(self.telegram_webhook_url)


settings = Settings()
