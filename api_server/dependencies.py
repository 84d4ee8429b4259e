"""Process-wide collaborators, built lazily and injectable via Depends"""

import logging
from typing import Optional
from fastapi import Depends

from coach_debate import DebateOrchestrator, ResponseGenerator, SQLiteTurnStore
from coach_debate.config import DB_PATH, LLM_MODEL
from llm_client import GroqClient

logger = logging.getLogger("api_server")

_store: Optional[SQLiteTurnStore] = None
_orchestrator: Optional[DebateOrchestrator] = None


def get_store() -> SQLiteTurnStore:
    global _store
    if _store is None:
        _store = SQLiteTurnStore(DB_PATH)
    return _store


def _create_llm_client() -> GroqClient:
    return GroqClient(model=LLM_MODEL)


def get_orchestrator(store: SQLiteTurnStore = Depends(get_store)) -> DebateOrchestrator:
    """Shared orchestrator

    The Groq client is only built when a turn is first generated, so routes
    that never call the LLM work without GROQ_API_KEY.
    """
    global _orchestrator
    if _orchestrator is None:
        generator = ResponseGenerator(client_factory=_create_llm_client)
        _orchestrator = DebateOrchestrator(store, generator)
        logger.info("Debate orchestrator created")
    return _orchestrator
