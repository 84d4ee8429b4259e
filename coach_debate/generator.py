"""Response generator: turns (topic, persona, context) into a coach's reply"""

import asyncio
import logging
from typing import Callable, Optional

from llm_client import APIKeyError, LLMError, RateLimitError

from .config import GENERATION_TIMEOUT_SECONDS, LLM_MAX_TOKENS
from .errors import GenerationError
from .prompts import create_coach_prompt, create_turn_prompt
from .types import Persona, parse_persona

logger = logging.getLogger(__name__)


class ResponseGenerator:
    """Async adapter over a blocking LLM client

    Args:
        client: Object with get_response(prompt, system_prompt, max_tokens)
        timeout: Seconds to wait for the LLM before giving up
        max_tokens: Completion budget per turn
        client_factory: Builds the client on first use when none is given
    """

    def __init__(
        self,
        client=None,
        timeout: float = GENERATION_TIMEOUT_SECONDS,
        max_tokens: int = LLM_MAX_TOKENS,
        client_factory: Optional[Callable[[], object]] = None,
    ):
        if client is None and client_factory is None:
            raise ValueError("Either client or client_factory is required")
        self.client = client
        self.client_factory = client_factory
        self.timeout = timeout
        self.max_tokens = max_tokens

    def _get_client(self):
        """Get or create the LLM client (lazy initialization)"""
        if self.client is None:
            self.client = self.client_factory()
        return self.client

    async def generate(self, topic: str, persona: Persona, context: Optional[str] = None) -> str:
        """Generate the text of one turn

        Raises:
            APIKeyError: No API key is configured, or the provider rejected it
            GenerationError: On any other LLM failure, timeout, or an empty reply
        """
        persona = parse_persona(persona)
        system_prompt = create_coach_prompt(topic, persona)
        user_prompt = create_turn_prompt(context)
        client = self._get_client()

        try:
            text = await asyncio.wait_for(
                asyncio.to_thread(
                    client.get_response,
                    prompt=user_prompt,
                    system_prompt=system_prompt,
                    max_tokens=self.max_tokens,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise GenerationError(f"LLM did not answer within {self.timeout}s") from e
        except APIKeyError:
            raise
        except RateLimitError as e:
            raise GenerationError(str(e), retry_after=e.retry_after) from e
        except LLMError as e:
            raise GenerationError(str(e)) from e

        if not isinstance(text, str) or not text.strip():
            raise GenerationError("LLM returned an empty response")

        logger.info("Generated %s turn (%d chars)", persona.value, len(text))
        return text.strip()
