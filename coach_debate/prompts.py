"""Prompt generation for the coach debate"""

from typing import Optional

from .personas import describe
from .types import Persona


def create_coach_prompt(topic: str, persona: Persona) -> str:
    """Create system prompt for a coach

    Args:
        topic: The debate topic
        persona: The coach who is speaking

    Returns:
        System prompt string
    """
    profile = describe(persona)
    return f"""You are a {persona.value} coach taking part in a debate about: "{topic}".
Your personality is {profile.tone} and you focus on {profile.focus}.
Keep a professional but competitive tone."""


def create_opening_prompt() -> str:
    """Create the user prompt when there is nothing to respond to"""
    return (
        "Give a brief opinion on the topic (two sentences at most) "
        "and ask the other coach a short question."
    )


def create_reply_prompt(context: str) -> str:
    """Create a reply prompt conditioned on the previous turn"""
    return f"""Debate context:
"{context}"

Reply to the last message briefly (two sentences at most) and ask the other coach a short question."""


def create_turn_prompt(context: Optional[str]) -> str:
    if context:
        return create_reply_prompt(context)
    return create_opening_prompt()
