"""Default configuration for the coach debate"""

import os

from .types import Persona, PersonaProfile

# Coach profiles
COACH_PROFILES = {
    Persona.CROSSFIT: PersonaProfile(
        tone="passionate and direct",
        focus="measurable results and fast adaptations",
    ),
    Persona.HEROS: PersonaProfile(
        tone="analytical and methodical",
        focus="technical precision and scientific progression",
    ),
}

# Topic pool used when a debate is started without a topic
DEFAULT_TOPICS = [
    "Is functional training or traditional training better for building strength?",
    "Should athletes focus on compound or isolation exercises?",
    "What is the ideal training frequency for recreational athletes?",
    "Is supplementation necessary to get meaningful results?",
    "What matters more in training: technique or intensity?",
]

# Storage
DB_PATH = os.getenv("COACH_DEBATE_DB", "coach_debate.db")

# LLM settings
LLM_MODEL = os.getenv("LLM_MODEL", "llama-3.3-70b-versatile")
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "300"))
GENERATION_TIMEOUT_SECONDS = float(os.getenv("GENERATION_TIMEOUT_SECONDS", "30"))
