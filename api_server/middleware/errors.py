"""Map debate and LLM exceptions to HTTP responses"""

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from coach_debate.errors import (
    DebateError,
    GenerationError,
    InvalidTurnError,
    NoActiveDebateError,
    NoPriorTurnError,
    NotFoundError,
    PersistenceError,
    StorageError,
    UnknownPersonaError,
)
from llm_client import APIKeyError

logger = logging.getLogger("api_server")

STATUS_CODES = {
    InvalidTurnError: 400,
    UnknownPersonaError: 400,
    NotFoundError: 404,
    NoActiveDebateError: 409,
    NoPriorTurnError: 409,
    GenerationError: 502,
    PersistenceError: 503,
    StorageError: 503,
}


def status_for(exc: DebateError) -> int:
    for exc_type, status in STATUS_CODES.items():
        if isinstance(exc, exc_type):
            return status
    return 500


async def debate_error_handler(request: Request, exc: DebateError) -> JSONResponse:
    status = status_for(exc)
    headers = None
    if isinstance(exc, GenerationError) and exc.retry_after is not None:
        status = 429
        headers = {"Retry-After": str(exc.retry_after)}
    if status >= 500:
        logger.error("%s: %s", type(exc).__name__, exc)
    return JSONResponse(
        status_code=status,
        content={"detail": str(exc), "error": type(exc).__name__},
        headers=headers,
    )


async def api_key_error_handler(request: Request, exc: APIKeyError) -> JSONResponse:
    return JSONResponse(
        status_code=401,
        content={"detail": "A Groq API key is required. Set GROQ_API_KEY.", "error": "APIKeyError"},
    )


def setup_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DebateError, debate_error_handler)
    app.add_exception_handler(APIKeyError, api_key_error_handler)
