"""Data classes for the coach debate"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .errors import InvalidTurnError, UnknownPersonaError


class Persona(str, Enum):
    """The two debating coaches. CROSSFIT always opens."""
    CROSSFIT = "CrossFit"
    HEROS = "HEROS"

    @property
    def other(self) -> "Persona":
        return Persona.HEROS if self is Persona.CROSSFIT else Persona.CROSSFIT

    def __str__(self) -> str:
        return self.value


FIRST_PERSONA = Persona.CROSSFIT


def parse_persona(value: object) -> Persona:
    """Convert a string (or Persona) into a Persona

    Raises:
        UnknownPersonaError: If the value is not one of the registered coaches
    """
    if isinstance(value, Persona):
        return value
    try:
        return Persona(value)
    except ValueError:
        raise UnknownPersonaError(value) from None


def persona_for_turn(turn_count: int) -> Persona:
    """Persona that speaks after `turn_count` committed turns"""
    return FIRST_PERSONA if turn_count % 2 == 0 else FIRST_PERSONA.other


def validate_turn_fields(topic: str, persona: object, message: str) -> Persona:
    """Reject empty topic/message and unknown personas before any I/O"""
    if not topic or not topic.strip():
        raise InvalidTurnError("Topic is required")
    if persona is None or persona == "":
        raise InvalidTurnError("Persona is required")
    if not message or not message.strip():
        raise InvalidTurnError("Message is required")
    return parse_persona(persona)


@dataclass(frozen=True)
class PersonaProfile:
    """Rhetorical profile of a coach"""
    tone: str
    focus: str

    def to_dict(self) -> dict:
        return {"tone": self.tone, "focus": self.focus}


@dataclass(frozen=True)
class Turn:
    """One committed message by one persona within a topic's debate"""
    id: str
    topic: str
    persona: Persona
    message: str
    created_at: float

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "topic": self.topic,
            "persona": self.persona.value,
            "message": self.message,
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class TopicThread:
    """All turns sharing a topic, oldest first"""
    topic: str
    turns: list[Turn] = field(default_factory=list)

    @property
    def latest(self) -> Optional[Turn]:
        return self.turns[-1] if self.turns else None

    def to_dict(self) -> dict:
        latest = self.latest
        return {
            "topic": self.topic,
            "turns": [t.to_dict() for t in self.turns],
            "last_created_at": latest.created_at if latest else None,
        }


@dataclass(frozen=True)
class OrchestratorState:
    """Turn-taking state derived from persisted turns"""
    active_topic: str = ""
    next_persona: Persona = FIRST_PERSONA
    last_message: Optional[str] = None
    last_persona: Optional[Persona] = None
    turn_count: int = 0

    @property
    def context(self) -> Optional[str]:
        """Context handed to the generator for the next turn"""
        if self.last_message is None:
            return None
        speaker = self.last_persona or self.next_persona.other
        return f"{speaker.value}: {self.last_message}"

    def to_dict(self) -> dict:
        return {
            "active_topic": self.active_topic,
            "next_persona": self.next_persona.value,
            "last_message": self.last_message,
            "last_persona": self.last_persona.value if self.last_persona else None,
            "turn_count": self.turn_count,
        }
