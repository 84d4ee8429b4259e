"""Coach Debate - turn-based debate between two coaching personas"""

from .types import Persona, PersonaProfile, Turn, TopicThread, OrchestratorState
from .errors import (
    DebateError,
    UnknownPersonaError,
    InvalidTurnError,
    NoActiveDebateError,
    NoPriorTurnError,
    GenerationError,
    PersistenceError,
    NotFoundError,
    StorageError,
)
from .config import DEFAULT_TOPICS
from .personas import describe
from .store import SQLiteTurnStore
from .generator import ResponseGenerator
from .reconstructor import SessionReconstructor
from .orchestrator import DebateOrchestrator

__all__ = [
    "Persona",
    "PersonaProfile",
    "Turn",
    "TopicThread",
    "OrchestratorState",
    "DebateError",
    "UnknownPersonaError",
    "InvalidTurnError",
    "NoActiveDebateError",
    "NoPriorTurnError",
    "GenerationError",
    "PersistenceError",
    "NotFoundError",
    "StorageError",
    "DEFAULT_TOPICS",
    "describe",
    "SQLiteTurnStore",
    "ResponseGenerator",
    "SessionReconstructor",
    "DebateOrchestrator",
]
