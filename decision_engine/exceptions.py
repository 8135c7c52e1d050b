"""
Custom exceptions for the decision engine.

Provides a small hierarchy separating rejected input, hard computation
failures and failures of external collaborators (store, notifications).
"""

from typing import Optional


class EngineError(Exception):
    """
    Base exception for all decision engine errors.

    All other exceptions inherit from this class, making it easy
    to catch any engine-related error.
    """
    pass


class ValidationError(EngineError):
    """
    Exception raised when an inbound signal fails validation.

    Rejected signals never reach the decision store. The ``reason``
    attribute is the user-facing explanation.

    Attributes:
        field: Name of the offending field
        message: What was wrong with it
    """

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"Validation error for '{field}': {message}")

    @property
    def reason(self) -> str:
        return str(self)


class InputError(EngineError):
    """
    Exception raised when scoring input cannot support a required computation.

    Insufficient history is normally absorbed by neutral fallbacks; this is
    only raised where no fallback exists (current price of an empty history).
    """
    pass


class CollaboratorError(EngineError):
    """
    Exception raised when an external collaborator fails.

    Covers the decision store and notification channels. Always caught and
    logged by the caller, never surfaced to scoring or intake callers.
    """

    def __init__(self, collaborator: str, message: str, cause: Optional[BaseException] = None):
        self.collaborator = collaborator
        self.message = message
        self.cause = cause
        super().__init__(f"{collaborator} failed: {message}")


class ConfigurationError(EngineError):
    """
    Exception raised for configuration-related errors.

    This includes scoring weights that do not sum to 1.0 and invalid
    settings values.
    """
    pass
