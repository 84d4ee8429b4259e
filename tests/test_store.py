"""Tests for SQLiteTurnStore."""

from unittest.mock import patch

import pytest

from coach_debate import (
    SQLiteTurnStore,
    Persona,
    NotFoundError,
    StorageError,
    InvalidTurnError,
)


def test_create_and_get(store):
    turn = store.create("T", Persona.CROSSFIT, "T")
    assert turn.id
    assert turn.persona is Persona.CROSSFIT
    assert store.get(turn.id) == turn


def test_create_accepts_persona_string(store):
    turn = store.create("T", "HEROS", "hi")
    assert turn.persona is Persona.HEROS


def test_create_rejects_empty_message(store):
    with pytest.raises(InvalidTurnError):
        store.create("T", Persona.CROSSFIT, "")
    assert store.count() == 0


def test_list_by_topic_is_oldest_first(store):
    a = store.create("T", Persona.CROSSFIT, "one")
    store.create("other", Persona.CROSSFIT, "x")
    b = store.create("T", Persona.HEROS, "two")
    turns = store.list_by_topic("T")
    assert [t.id for t in turns] == [a.id, b.id]
    assert turns[0].created_at < turns[1].created_at


def test_list_grouped_most_recent_first(store):
    store.create("A", Persona.CROSSFIT, "a1")
    store.create("B", Persona.CROSSFIT, "b1")
    store.create("A", Persona.HEROS, "a2")
    threads = store.list_grouped_by_topic()
    assert [t.topic for t in threads] == ["A", "B"]
    assert [t.message for t in threads[0].turns] == ["a1", "a2"]
    assert threads[0].latest.message == "a2"


def test_update_replaces_message_only(store):
    turn = store.create("T", Persona.HEROS, "old")
    updated = store.update(turn.id, "new")
    assert updated.message == "new"
    assert updated.created_at == turn.created_at
    assert store.get(turn.id).message == "new"


def test_update_missing(store):
    with pytest.raises(NotFoundError):
        store.update("nope", "x")


def test_update_of_turn_deleted_after_lookup(store):
    turn = store.create("T", Persona.HEROS, "old")
    store.delete_one(turn.id)
    with patch.object(store, "get", return_value=turn):
        with pytest.raises(NotFoundError):
            store.update(turn.id, "new")
    assert store.count() == 0


def test_update_rejects_empty(store):
    turn = store.create("T", Persona.HEROS, "old")
    with pytest.raises(InvalidTurnError):
        store.update(turn.id, " ")


def test_delete_one(store):
    turn = store.create("T", Persona.CROSSFIT, "T")
    store.delete_one(turn.id)
    with pytest.raises(NotFoundError):
        store.get(turn.id)
    with pytest.raises(NotFoundError):
        store.delete_one(turn.id)


def test_delete_topic_and_all(store):
    for topic in ("A", "A", "B"):
        store.create(topic, Persona.CROSSFIT, "m")
    assert store.delete_topic("A") == 2
    assert store.count() == 1
    assert store.delete_all() == 1
    assert store.list_grouped_by_topic() == []


def test_turns_survive_reopen(db_path):
    first = SQLiteTurnStore(db_path)
    turn = first.create("T", Persona.CROSSFIT, "T")
    first.close()

    second = SQLiteTurnStore(db_path)
    try:
        assert second.list_by_topic("T") == [turn]
    finally:
        second.close()


def test_closed_connection_raises_storage_error(db_path):
    s = SQLiteTurnStore(db_path)
    s.close()
    with pytest.raises(StorageError):
        s.list_all()
