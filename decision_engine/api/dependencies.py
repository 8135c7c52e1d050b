"""
Dependency injection for API routes.
"""
import time
from typing import Optional

from decision_engine.alerting.manager import NotificationDispatcher
from decision_engine.config.settings import Config
from decision_engine.database.recorder import (
    DecisionRecorder,
    SqlDecisionRecorder,
)
from decision_engine.signals.intake.pipeline import SignalIntakePipeline
from decision_engine.signals.scoring.scorer import PredictionScorer


class AppState:
    """
    Application state container.

    Holds references to the scorer, intake pipeline and their collaborators.
    """

    def __init__(self):
        self.config: Optional[Config] = None
        self.recorder: Optional[DecisionRecorder] = None
        self.notifier: Optional[NotificationDispatcher] = None
        self.scorer: Optional[PredictionScorer] = None
        self.pipeline: Optional[SignalIntakePipeline] = None
        self.start_time: float = 0

    @property
    def initialized(self) -> bool:
        return self.config is not None

    def initialize(
        self,
        config: Config,
        recorder: Optional[DecisionRecorder] = None,
        notifier: Optional[NotificationDispatcher] = None,
    ):
        """Initialize with configuration."""
        self.config = config
        self.start_time = time.time()

        self.recorder = recorder or SqlDecisionRecorder.from_config(config)

        if notifier is None and config.notifications_configured:
            notifier = NotificationDispatcher(config.notification_config())
        self.notifier = notifier

        self.scorer = PredictionScorer(recorder=self.recorder, notifier=self.notifier)
        self.pipeline = SignalIntakePipeline.from_config(
            config, recorder=self.recorder, notifier=self.notifier
        )

    def reset(self):
        self.__init__()


# Global app state
app_state = AppState()


def get_config() -> Config:
    """Get application configuration."""
    if app_state.config is None:
        app_state.initialize(Config())
    return app_state.config


def get_recorder() -> DecisionRecorder:
    """Get the decision recorder."""
    if app_state.recorder is None:
        get_config()
    return app_state.recorder


def get_scorer() -> PredictionScorer:
    """Get the prediction scorer."""
    if app_state.scorer is None:
        get_config()
    return app_state.scorer


def get_pipeline() -> SignalIntakePipeline:
    """Get the signal intake pipeline."""
    if app_state.pipeline is None:
        get_config()
    return app_state.pipeline


def get_notifier() -> Optional[NotificationDispatcher]:
    """Get the notification dispatcher, if any channel is configured."""
    return app_state.notifier
