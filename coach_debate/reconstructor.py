"""Session reconstruction: rebuild turn-taking state from persisted turns"""

import asyncio
import logging
from typing import Optional, Sequence

from .types import OrchestratorState, Turn, TopicThread, persona_for_turn

logger = logging.getLogger(__name__)


def derive_state(topic: str, turns: Sequence[Turn]) -> OrchestratorState:
    """Derive the state of one topic from its turns (oldest first)

    The next persona comes from the turn count, never from flipping the
    last turn's persona, so a thread with a deleted turn in the middle
    still yields a well-defined speaker.
    """
    if not turns:
        return OrchestratorState(active_topic=topic)
    last = turns[-1]
    return OrchestratorState(
        active_topic=topic,
        next_persona=persona_for_turn(len(turns)),
        last_message=last.message,
        last_persona=last.persona,
        turn_count=len(turns),
    )


def select_active_thread(threads: Sequence[TopicThread]) -> Optional[TopicThread]:
    """Thread whose latest turn is the most recent (ties broken by turn id)"""
    candidates = [t for t in threads if t.turns]
    if not candidates:
        return None
    return max(candidates, key=lambda t: (t.latest.created_at, t.latest.id))


class SessionReconstructor:
    """Rebuilds OrchestratorState from a turn store

    Args:
        store: Any object exposing list_grouped_by_topic() and list_by_topic()
    """

    def __init__(self, store):
        self._store = store

    async def reconstruct(self) -> OrchestratorState:
        """State of the most recently active debate, or the initial state"""
        threads = await asyncio.to_thread(self._store.list_grouped_by_topic)
        thread = select_active_thread(threads)
        if thread is None:
            logger.info("No stored turns; starting from an empty state")
            return OrchestratorState()
        state = derive_state(thread.topic, thread.turns)
        logger.info("Reconstructed topic %r with %d turns, next: %s",
                    state.active_topic, state.turn_count, state.next_persona.value)
        return state

    async def for_topic(self, topic: str) -> OrchestratorState:
        turns = await asyncio.to_thread(self._store.list_by_topic, topic)
        return derive_state(topic, turns)
