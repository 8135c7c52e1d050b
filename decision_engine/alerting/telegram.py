"""
Telegram integration for alerts.
"""
import logging
from typing import Optional
from dataclasses import dataclass

from telegram import Bot
from telegram.constants import ParseMode
from telegram.error import TelegramError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TelegramConfig:
    """Telegram configuration."""
    bot_token: str
    chat_id: str
    enabled: bool = True


class TelegramClient:
    """
    Telegram client for sending alerts.

    Uses python-telegram-bot library. Configuration is supplied per
    instance; there is no shared channel state between clients.
    """

    def __init__(self, config: TelegramConfig, bot: Optional[Bot] = None):
        self.config = config
        self.bot: Optional[Bot] = bot

        if self.bot is None and config.enabled and config.bot_token:
            self.bot = Bot(token=config.bot_token)
            logger.info("Telegram client initialized")

    @property
    def is_available(self) -> bool:
        """Check if Telegram is configured and enabled."""
        return self.bot is not None and self.config.enabled and bool(self.config.chat_id)

    async def send_message(
        self,
        text: str,
        parse_mode: str = ParseMode.HTML,
        disable_notification: bool = False
    ) -> bool:
        """
        Send a text message to the configured chat.

        Args:
            text: Message text (can include HTML formatting)
            parse_mode: Parse mode (HTML or Markdown)
            disable_notification: If True, send silently

        Returns:
            True if sent successfully, False otherwise
        """
        if not self.is_available:
            logger.info("Telegram not configured or inactive, message not sent")
            return False

        try:
            await self.bot.send_message(
                chat_id=self.config.chat_id,
                text=text,
                parse_mode=parse_mode,
                disable_notification=disable_notification
            )
            logger.debug("Telegram message sent successfully")
            return True
        except TelegramError as e:
            logger.error(f"Failed to send Telegram message: {e}")
            return False

    async def test_connection(self) -> dict:
        """Test Telegram connection."""
        if not self.config.bot_token:
            return {"success": False, "error": "Bot token not configured"}

        try:
            bot = self.bot or Bot(token=self.config.bot_token)
            me = await bot.get_me()
            return {
                "success": True,
                "bot_username": me.username,
                "bot_name": me.first_name
            }
        except TelegramError as e:
            return {"success": False, "error": str(e)}
