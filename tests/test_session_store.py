"""Tests for the in-memory session store."""

from codeguard.core.config import settings
from codeguard.services.session_store import SessionStore


def test_create_and_get():
    store = SessionStore()
    session = store.create(language="Python")
    assert store.get(session.session_id) is session
    assert session.snapshot().language == "Python"
    assert len(store) == 1


def test_create_uses_default_language():
    assert SessionStore().create().snapshot().language == settings.DEFAULT_LANGUAGE


def test_delete_frees_the_session():
    store = SessionStore()
    session = store.create()

    assert store.delete(session.session_id) is True
    assert store.get(session.session_id) is None
    assert len(store) == 0


def test_delete_missing_returns_false():
    store = SessionStore()
    store.create()
    assert store.delete("does-not-exist") is False
    assert len(store) == 1
