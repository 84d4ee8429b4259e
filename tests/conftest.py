"""Shared fixtures: temporary stores and a scripted response generator."""

from pathlib import Path

import pytest

from coach_debate import DebateOrchestrator, SQLiteTurnStore


class StubGenerator:
    """Returns scripted replies in order and records every call.

    An Exception in the script is raised instead of returned.
    """

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    async def generate(self, topic, persona, context=None):
        self.calls.append({"topic": topic, "persona": persona, "context": context})
        if not self.replies:
            return f"reply {len(self.calls)}"
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    return str(tmp_path / "turns.db")


@pytest.fixture
def store(db_path: str):
    s = SQLiteTurnStore(db_path)
    yield s
    s.close()


@pytest.fixture
def make_orchestrator(store):
    """Build an orchestrator over the temp store with a scripted generator."""

    def _make(*replies, topics=("T",)):
        generator = StubGenerator(*replies)
        orch = DebateOrchestrator(store, generator, topics=topics, choose_topic=lambda pool: pool[0])
        return orch, generator

    return _make
