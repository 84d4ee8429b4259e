"""LLM Client - Abstraction layer for LLM APIs"""

from .exceptions import LLMError, RateLimitError, APIKeyError, LLMConnectionError, ModelError
from .groq_client import GroqClient

__all__ = [
    "LLMError",
    "RateLimitError",
    "APIKeyError",
    "LLMConnectionError",
    "ModelError",
    "GroqClient",
]
