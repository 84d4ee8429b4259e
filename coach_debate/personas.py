"""Persona registry: the static catalog of debating coaches"""

from typing import Union

from .config import COACH_PROFILES
from .errors import UnknownPersonaError
from .types import Persona, PersonaProfile, parse_persona


def describe(persona: Union[Persona, str]) -> PersonaProfile:
    """Return the tone and focus of a coach

    Args:
        persona: A Persona or its string value ("CrossFit" / "HEROS")

    Returns:
        PersonaProfile for the coach

    Raises:
        UnknownPersonaError: If the persona is not registered
    """
    key = parse_persona(persona)
    profile = COACH_PROFILES.get(key)
    if profile is None:
        raise UnknownPersonaError(persona)
    return profile


def all_personas() -> list[Persona]:
    """Registered coaches in speaking order"""
    return list(Persona)
