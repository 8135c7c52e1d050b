import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict

import coloredlogs

from decision_engine.config.settings import Config
from .formatters import JSONFormatter, PrettyFormatter

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class EngineLogger:
    """Custom logger with context support"""

    def __init__(self, name: str = "decision_engine"):
        self.logger = logging.getLogger(name)
        self._context: Dict[str, Any] = {}
        self._setup_done = False

    def setup(self, config: Config):
        """Setup logging based on config"""
        if self._setup_done:
            return

        self.logger.setLevel(config.log_level)
        self.logger.handlers.clear()
        # Module loggers (decision_engine.*) propagate here; stop at this level
        self.logger.propagate = False

        if config.env == "development":
            coloredlogs.install(
                level=config.log_level,
                logger=self.logger,
                fmt=CONSOLE_FORMAT,
                stream=sys.stdout,
            )
        else:
            console = logging.StreamHandler(sys.stdout)
            if config.env == "production":
                console.setFormatter(JSONFormatter())
            else:
                console.setFormatter(PrettyFormatter(CONSOLE_FORMAT))
            console.setLevel(config.log_level)
            self.logger.addHandler(console)

        # File handler
        if config.log_file:
            try:
                log_dir = os.path.dirname(config.log_file)
                if log_dir:
                    os.makedirs(log_dir, exist_ok=True)

                file_handler = RotatingFileHandler(
                    config.log_file,
                    maxBytes=10 * 1024 * 1024,  # 10MB
                    backupCount=5
                )
                file_handler.setFormatter(JSONFormatter())
                file_handler.setLevel(logging.DEBUG)
                self.logger.addHandler(file_handler)
            except OSError as e:
                self.logger.warning(f"Failed to setup file logging: {e}")

        # Set external libraries to WARNING to reduce noise
        for noisy in ("aiohttp", "httpx", "telegram", "sqlalchemy.engine"):
            logging.getLogger(noisy).setLevel(logging.WARNING)

        self._setup_done = True

    def with_context(self, **kwargs) -> "EngineLogger":
        """Return logger with additional context"""
        new_logger = EngineLogger(self.logger.name)
        new_logger.logger = self.logger
        new_logger._context = {**self._context, **kwargs}
        new_logger._setup_done = self._setup_done
        return new_logger

    def _log(self, level: int, msg: str, **kwargs):
        # Merge context
        extra_data = {**self._context, **kwargs}
        if extra_data:
            extra = {"extra_data": extra_data}
        else:
            extra = {}
        self.logger.log(level, msg, extra=extra)

    def debug(self, msg: str, **kwargs):
        self._log(logging.DEBUG, msg, **kwargs)

    def info(self, msg: str, **kwargs):
        self._log(logging.INFO, msg, **kwargs)

    def warning(self, msg: str, **kwargs):
        self._log(logging.WARNING, msg, **kwargs)

    def error(self, msg: str, **kwargs):
        self._log(logging.ERROR, msg, **kwargs)

    def critical(self, msg: str, **kwargs):
        self._log(logging.CRITICAL, msg, **kwargs)

    def decision(self, symbol: str, **kwargs):
        """Log a produced prediction decision"""
        self.info(f"DECISION: {symbol}", decision=True, symbol=symbol, **kwargs)

    def signal(self, symbol: str, **kwargs):
        """Log an accepted inbound signal"""
        self.info(f"SIGNAL: {symbol}", signal=True, symbol=symbol, **kwargs)


# Singleton
logger = EngineLogger()


def setup_logging(config: Config):
    """Initialize logging"""
    logger.setup(config)
