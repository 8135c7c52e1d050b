from typing import List, Optional, Tuple, Type, Dict, Any
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource
import yaml
import os


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """
    A simple settings source that loads variables from a YAML file
    at the project's config/config.yaml location.
    """
    def get_field_value(self, field: Any, field_name: str) -> Tuple[Any, str, bool]:
        pass

    def __call__(self) -> Dict[str, Any]:
        config_file = os.getenv("CONFIG_FILE", "config/config.yaml")
        if os.path.exists(config_file):
            with open(config_file) as f:
                return yaml.safe_load(f) or {}
        return {}


class Config(BaseSettings):
    # Environment
    env: str = Field("development", description="Environment: development, staging, production")
    debug: bool = False

    # Decision store
    database_url: str = "sqlite+aiosqlite:///data/decisions.db"
    database_echo: bool = False

    # Notifications
    telegram_bot_token: Optional[str] = None
    telegram_chat_id: Optional[str] = None
    telegram_enabled: bool = True
    notification_webhook_url: Optional[str] = None
    notification_webhook_secret: Optional[str] = None
    notify_min_confidence: float = Field(0.5, ge=0, le=1)

    # Signal intake
    default_signal_confidence: float = Field(0.7, ge=0, le=1)
    automated_actions_enabled: bool = False
    signal_allowed_symbols: List[str] = []
    signal_allowed_actions: List[str] = []
    signal_min_confidence: float = Field(0.0, ge=0, le=1)

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = "logs/engine.log"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()

    @property
    def notifications_configured(self) -> bool:
        has_telegram = bool(self.telegram_enabled and self.telegram_bot_token and self.telegram_chat_id)
        return has_telegram or bool(self.notification_webhook_url)

    def notification_config(self):
        """Build the notification dispatcher configuration from these settings."""
        from decision_engine.alerting.manager import NotificationConfig
        from decision_engine.alerting.telegram import TelegramConfig
        from decision_engine.alerting.webhook import WebhookConfig

        telegram = None
        if self.telegram_bot_token and self.telegram_chat_id:
            telegram = TelegramConfig(
                bot_token=self.telegram_bot_token,
                chat_id=self.telegram_chat_id,
                enabled=self.telegram_enabled,
            )

        webhook = None
        if self.notification_webhook_url:
            webhook = WebhookConfig(
                url=self.notification_webhook_url,
                secret=self.notification_webhook_secret,
            )

        return NotificationConfig(
            telegram=telegram,
            webhook=webhook,
            min_confidence=self.notify_min_confidence,
        )

    def signal_filter(self):
        """Build the automated-action filter from these settings."""
        from decision_engine.signals.intake.actions import SignalFilter

        return SignalFilter(
            symbols=[s.upper() for s in self.signal_allowed_symbols],
            actions=[a.lower() for a in self.signal_allowed_actions],
            min_confidence=self.signal_min_confidence,
        )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )
