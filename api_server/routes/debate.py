"""Debate API endpoints"""

import asyncio
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel, Field

from api_server.dependencies import get_orchestrator, get_store
from api_server.middleware.rate_limit import limiter, get_rate_limit_string
from coach_debate import DebateOrchestrator, OrchestratorState, SQLiteTurnStore, Turn

router = APIRouter(prefix="/debate", tags=["debate"])


# Request/Response models
class StartRequest(BaseModel):
    """Request to start a debate; a topic is picked from the pool when omitted"""
    topic: Optional[str] = Field(default=None, min_length=1, max_length=300)


class ResetRequest(BaseModel):
    """Request to reset debates; all topics are purged when topic is omitted"""
    topic: Optional[str] = Field(default=None, min_length=1, max_length=300)


class EditRequest(BaseModel):
    """New text for a turn"""
    message: str = Field(..., min_length=1)


class TurnResponse(BaseModel):
    id: str
    topic: str
    persona: str
    message: str
    created_at: float


class StateResponse(BaseModel):
    active_topic: str
    next_persona: str
    last_message: Optional[str]
    last_persona: Optional[str]
    turn_count: int


class ThreadResponse(BaseModel):
    topic: str
    turns: list[TurnResponse]
    last_created_at: Optional[float]


class EditResponse(BaseModel):
    """The edited turn and the whole thread, including any follow-up turn"""
    turn: TurnResponse
    turns: list[TurnResponse]


class ResetResponse(BaseModel):
    deleted_count: int


class DeleteResponse(BaseModel):
    deleted: bool


def _turn(turn: Turn) -> TurnResponse:
    return TurnResponse(**turn.to_dict())


def _state(state: OrchestratorState) -> StateResponse:
    return StateResponse(**state.to_dict())


@router.get("/state", response_model=StateResponse)
async def get_state(orchestrator: DebateOrchestrator = Depends(get_orchestrator)):
    """Current turn-taking state (whose turn is next, last message)"""
    return _state(await orchestrator.current_state())


@router.post("/reconstruct", response_model=StateResponse)
async def reconstruct_state(orchestrator: DebateOrchestrator = Depends(get_orchestrator)):
    """Discard cached state and rebuild it from the stored turns"""
    return _state(await orchestrator.reconstruct())


@router.post("/start", response_model=TurnResponse, status_code=201)
@limiter.limit(get_rate_limit_string())
async def start_debate(
    request: Request,
    body: Optional[StartRequest] = None,
    orchestrator: DebateOrchestrator = Depends(get_orchestrator),
):
    """Start a new debate

    The first turn is always CrossFit and its message is the topic itself.
    """
    topic = body.topic if body else None
    return _turn(await orchestrator.start_debate(topic))


@router.post("/continue", response_model=TurnResponse)
@limiter.limit(get_rate_limit_string())
async def continue_debate(
    request: Request,
    orchestrator: DebateOrchestrator = Depends(get_orchestrator),
):
    """Generate the next coach's reply to the last turn"""
    return _turn(await orchestrator.continue_debate())


@router.post("/reset", response_model=ResetResponse)
async def reset_debate(
    body: Optional[ResetRequest] = None,
    orchestrator: DebateOrchestrator = Depends(get_orchestrator),
):
    """Delete stored turns. Without a topic this removes every debate."""
    topic = body.topic if body else None
    return ResetResponse(deleted_count=await orchestrator.reset_debate(topic))


@router.get("/turns", response_model=list[ThreadResponse])
async def list_turns(
    topic: Optional[str] = Query(default=None, min_length=1),
    store: SQLiteTurnStore = Depends(get_store),
):
    """All debates grouped by topic, most recent first, or a single topic's thread"""
    threads = await asyncio.to_thread(store.list_grouped_by_topic)
    if topic is not None:
        threads = [t for t in threads if t.topic == topic]
    return [ThreadResponse(**t.to_dict()) for t in threads]


@router.get("/turns/{turn_id}", response_model=TurnResponse)
async def get_turn(turn_id: str, store: SQLiteTurnStore = Depends(get_store)):
    return _turn(await asyncio.to_thread(store.get, turn_id))


@router.put("/turns/{turn_id}", response_model=EditResponse)
@limiter.limit(get_rate_limit_string())
async def edit_turn(
    request: Request,
    turn_id: str,
    body: EditRequest,
    orchestrator: DebateOrchestrator = Depends(get_orchestrator),
):
    """Replace a turn's message

    Editing an earlier turn also generates one reply from the other coach,
    appended at the end of the debate. Later turns are not regenerated.
    """
    edited = await orchestrator.edit_turn(turn_id, body.message)
    thread = await asyncio.to_thread(orchestrator.store.list_by_topic, edited.topic)
    return EditResponse(turn=_turn(edited), turns=[_turn(t) for t in thread])


@router.delete("/turns/{turn_id}", response_model=DeleteResponse)
async def delete_turn(
    turn_id: str,
    orchestrator: DebateOrchestrator = Depends(get_orchestrator),
):
    await orchestrator.delete_turn(turn_id)
    return DeleteResponse(deleted=True)
