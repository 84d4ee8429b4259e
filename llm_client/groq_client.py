"""Groq API client"""

import logging
import os
import time
from typing import Optional

from .exceptions import RateLimitError, APIKeyError, LLMConnectionError, LLMError, ModelError

logger = logging.getLogger(__name__)


class GroqClient:
    """Client for Groq chat completions"""

    DEFAULT_MODEL = "llama-3.3-70b-versatile"

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        """Initialize the Groq client

        Args:
            api_key: Groq API key. If not provided, reads from GROQ_API_KEY env var.
            model: Default model for completions

        Raises:
            APIKeyError: If no API key is provided or found in environment
        """
        self.api_key = api_key or os.getenv("GROQ_API_KEY")
        if not self.api_key:
            raise APIKeyError(
                "GROQ_API_KEY not found. Set it as an environment variable or pass it to the constructor."
            )
        self.model = model or self.DEFAULT_MODEL
        self._client = None

    def _get_client(self):
        """Lazy initialization of Groq client"""
        if self._client is None:
            from groq import Groq
            self._client = Groq(api_key=self.api_key)
        return self._client

    def get_response(
        self,
        prompt: str,
        system_prompt: str,
        max_tokens: int = 200,
        model: Optional[str] = None,
        max_retries: int = 3,
    ) -> str:
        """Get a response from Groq API

        Args:
            prompt: User prompt
            system_prompt: System prompt
            max_tokens: Maximum tokens in response
            model: Model to use (defaults to the client's model)
            max_retries: Number of attempts on rate limit

        Returns:
            Response text

        Raises:
            RateLimitError: If rate limited after all retries
            APIKeyError: If the key is rejected
            ModelError: If the completion has no text
            LLMError: For other API errors
        """
        import groq

        client = self._get_client()
        model = model or self.model

        for attempt in range(max_retries):
            try:
                response = client.chat.completions.create(
                    model=model,
                    messages=[
                        {"role": "system", "content": system_prompt},
                        {"role": "user", "content": prompt},
                    ],
                    max_tokens=max_tokens,
                )
            except groq.RateLimitError:
                wait_time = 5 * (attempt + 1)
                if attempt < max_retries - 1:
                    logger.warning("Groq rate limit hit, retrying in %ss", wait_time)
                    time.sleep(wait_time)
                    continue
                raise RateLimitError(
                    f"API rate limit exceeded after {max_retries} retries",
                    retry_after=60,
                )
            except groq.AuthenticationError:
                raise APIKeyError("Invalid API key")
            except groq.APIConnectionError as e:
                if attempt < max_retries - 1:
                    logger.warning("Groq unreachable (%s), retrying", e)
                    continue
                raise LLMConnectionError(f"Groq API unreachable: {e}") from e
            except groq.APIStatusError as e:
                raise LLMError(f"Groq API error: {e}", status_code=e.status_code) from e
            except groq.APIError as e:
                raise LLMError(f"Groq API error: {e}") from e

            if not response.choices or not response.choices[0].message.content:
                raise ModelError("Groq returned an empty completion")
            return response.choices[0].message.content

        raise LLMError("Unexpected error in get_response")
