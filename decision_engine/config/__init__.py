from decision_engine.config.settings import Config

__all__ = ["Config"]
