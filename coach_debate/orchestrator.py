"""Debate orchestrator: alternation, context threading and turn commits"""

import asyncio
import logging
import random
from typing import Callable, Optional, Sequence

from .config import DEFAULT_TOPICS
from .errors import (
    InvalidTurnError,
    NoActiveDebateError,
    NoPriorTurnError,
    PersistenceError,
    StorageError,
)
from .reconstructor import SessionReconstructor
from .types import FIRST_PERSONA, OrchestratorState, Persona, Turn, validate_turn_fields

logger = logging.getLogger(__name__)


class DebateOrchestrator:
    """Drives one topic's alternating conversation between the two coaches.

    The orchestrator keeps a cached OrchestratorState. The cache is only
    trusted when it was built by this instance's own appends; edits,
    deletes and a fresh start all mark it stale, and the next operation
    that needs it re-derives it from the store.

    Args:
        store: Turn store (see SQLiteTurnStore)
        generator: Object with ``async generate(topic, persona, context) -> str``
        topics: Pool used when start_debate() gets no topic
        choose_topic: Picks one topic from the pool (random.choice by default)
    """

    def __init__(
        self,
        store,
        generator,
        topics: Sequence[str] = DEFAULT_TOPICS,
        choose_topic: Callable[[Sequence[str]], str] = random.choice,
    ):
        self.store = store
        self.generator = generator
        self.topics = list(topics)
        self.choose_topic = choose_topic
        self.reconstructor = SessionReconstructor(store)
        self._state = OrchestratorState()
        self._loaded = False
        self._stale = True
        self._lock = asyncio.Lock()

    @property
    def state(self) -> OrchestratorState:
        return self._state

    # ---- Public API ---------------------------------------------------------

    async def reconstruct(self) -> OrchestratorState:
        """Rebuild state for the most recently active topic and cache it"""
        async with self._lock:
            return await self._reconstruct()

    async def current_state(self) -> OrchestratorState:
        """Cached state, refreshed from the store when it is stale"""
        async with self._lock:
            return await self._current_state()

    async def start_debate(self, topic_hint: Optional[str] = None) -> Turn:
        """Start a debate and commit the seed turn (the topic text itself)"""
        if topic_hint is not None and not topic_hint.strip():
            raise InvalidTurnError("Topic is required")
        if topic_hint is None and not self.topics:
            raise InvalidTurnError("No topic given and the topic pool is empty")
        topic = topic_hint.strip() if topic_hint else self.choose_topic(self.topics)

        async with self._lock:
            self._state = OrchestratorState(active_topic=topic, next_persona=FIRST_PERSONA)
            self._loaded = True
            self._stale = False
            turn = await self._commit(topic, FIRST_PERSONA, topic)
            if await asyncio.to_thread(self.store.count, topic) > 1:
                # reused topic: the seed was appended to an existing thread
                logger.warning("Topic %r already had turns; state will be re-derived", topic)
                self._stale = True
            logger.info("Started debate %r", topic)
            return turn

    async def continue_debate(self) -> Turn:
        """Generate and commit the next persona's reply to the last turn"""
        async with self._lock:
            state = await self._current_state()
            if not state.active_topic:
                raise NoActiveDebateError()
            if state.last_message is None:
                raise NoPriorTurnError(state.active_topic)

            persona = state.next_persona
            context = state.context
            logger.info("Continuing %r as %s", state.active_topic, persona.value)
            text = await self.generator.generate(state.active_topic, persona, context)
            return await self._commit(state.active_topic, persona, text)

    async def reset_debate(self, topic: Optional[str] = None) -> int:
        """Clear local state and purge stored turns

        Without a topic every turn of every debate is deleted. With a
        topic only that thread is removed, and local state is cleared only
        when it was the active one.

        Returns:
            Number of deleted turns
        """
        async with self._lock:
            if topic is None:
                self._state = OrchestratorState()
                self._loaded = True
                self._stale = False
                deleted = await asyncio.to_thread(self.store.delete_all)
                logger.warning("Reset removed all %d turns", deleted)
                return deleted

            deleted = await asyncio.to_thread(self.store.delete_topic, topic)
            if self._state.active_topic == topic:
                self._state = OrchestratorState()
                self._stale = False
            logger.info("Reset removed %d turns of %r", deleted, topic)
            return deleted

    async def edit_turn(self, turn_id: str, new_message: str) -> Turn:
        """Replace a turn's message

        If the edited turn is not the last of its topic, one follow-up turn
        is generated for the opposing persona with the edited text as
        context. Turns that already followed the edited one are left as
        they are. The follow-up makes the edited turn's topic the active one.
        """
        if not new_message or not new_message.strip():
            raise InvalidTurnError("Message is required")

        async with self._lock:
            edited = await asyncio.to_thread(self.store.update, turn_id, new_message)
            self._stale = True
            thread = await asyncio.to_thread(self.store.list_by_topic, edited.topic)
            if thread and thread[-1].id != edited.id:
                persona = edited.persona.other
                context = f"{edited.persona.value}: {new_message}"
                logger.info("Edited non-final turn %s; generating %s follow-up",
                            turn_id, persona.value)
                text = await self.generator.generate(edited.topic, persona, context)
                await self._commit(edited.topic, persona, text, update_cache=False)
                if edited.topic != self._state.active_topic:
                    # the follow-up is now the newest turn, so its topic is active
                    logger.info("Active debate switched to %r", edited.topic)
                    self._state = OrchestratorState(active_topic=edited.topic)
                    self._loaded = True
            return edited

    async def delete_turn(self, turn_id: str) -> None:
        """Remove a turn; the next speaker is re-derived from what remains"""
        async with self._lock:
            await asyncio.to_thread(self.store.delete_one, turn_id)
            self._stale = True
            logger.info("Deleted turn %s", turn_id)

    # ---- Internal helpers ---------------------------------------------------

    async def _reconstruct(self) -> OrchestratorState:
        self._state = await self.reconstructor.reconstruct()
        self._loaded = True
        self._stale = False
        return self._state

    async def _current_state(self) -> OrchestratorState:
        if not self._loaded:
            return await self._reconstruct()
        if self._stale and self._state.active_topic:
            self._state = await self.reconstructor.for_topic(self._state.active_topic)
            self._stale = False
        return self._state

    async def _commit(self, topic: str, persona: Persona, message: str,
                      update_cache: bool = True) -> Turn:
        validate_turn_fields(topic, persona, message)
        try:
            turn = await asyncio.to_thread(self.store.create, topic, persona, message)
        except StorageError as e:
            logger.error("Could not save %s turn for %r: %s", persona.value, topic, e)
            raise PersistenceError(f"Could not save turn: {e}") from e

        if update_cache:
            state = self._state
            self._state = OrchestratorState(
                active_topic=topic,
                next_persona=persona.other,
                last_message=message,
                last_persona=persona,
                turn_count=state.turn_count + 1,
            )
        return turn
