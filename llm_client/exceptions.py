"""Exceptions for LLM client"""

from typing import Optional


class LLMError(Exception):
    """Base exception for LLM errors"""

    def __init__(self, message: str = "LLM error", status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(LLMError):
    """Raised when API rate limit is exceeded"""

    def __init__(self, message: str = "API rate limit exceeded", retry_after: int = 60):
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


class APIKeyError(LLMError):
    """Raised when API key is missing or invalid"""

    def __init__(self, message: str = "API key is missing or invalid"):
        super().__init__(message, status_code=401)


class LLMConnectionError(LLMError):
    """Raised when the provider cannot be reached"""

    def __init__(self, message: str = "Could not reach the LLM provider"):
        super().__init__(message)


class ModelError(LLMError):
    """Raised when the model returns an empty or malformed completion"""

    def __init__(self, message: str = "Model error"):
        super().__init__(message)
