"""Exceptions raised by the debate core"""

from typing import Optional


class DebateError(Exception):
    """Base exception for debate errors"""
    pass


class UnknownPersonaError(DebateError):
    """Raised when a persona is not part of the registry"""

    def __init__(self, persona: object):
        super().__init__(f"Unknown persona: {persona!r}")
        self.persona = persona


class InvalidTurnError(DebateError):
    """Raised when a turn is missing its topic, persona or message"""

    def __init__(self, message: str = "Turn fields are missing or empty"):
        super().__init__(message)


class NoActiveDebateError(DebateError):
    """Raised when continuing without an active topic"""

    def __init__(self, message: str = "No active debate. Start a new debate first."):
        super().__init__(message)


class NoPriorTurnError(DebateError):
    """Raised when the active topic has no turns to respond to"""

    def __init__(self, topic: str):
        super().__init__(f"No previous turn found for topic: {topic!r}")
        self.topic = topic


class GenerationError(DebateError):
    """Raised when the response generator fails, times out or returns nothing"""

    def __init__(self, message: str = "Response generation failed", retry_after: Optional[int] = None):
        super().__init__(message)
        self.retry_after = retry_after


class PersistenceError(DebateError):
    """Raised when a generated turn could not be committed"""

    def __init__(self, message: str = "Generated turn could not be saved"):
        super().__init__(message)


class NotFoundError(DebateError):
    """Raised when a turn id does not exist"""

    def __init__(self, turn_id: str):
        super().__init__(f"Turn not found: {turn_id}")
        self.turn_id = turn_id


class StorageError(DebateError):
    """Raised on any failure of the underlying database"""

    def __init__(self, message: str = "Storage failure"):
        super().__init__(message)
