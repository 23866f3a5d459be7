"""Test in-memory sessions"""

import pytest

from spotify_backup.core.session import Session, SessionStore

from conftest import make_playlist


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return SessionStore(ttl_sec=60, clock=clock)


def test_create_issues_unique_ids(store):
    ids = {store.create().session_id for _ in range(100)}
    assert len(ids) == 100
    assert len(store) == 100


def test_find_returns_created_session(store):
    session = store.create()
    assert store.find(session.session_id) is session
    assert not session.logged_in


def test_unknown_ids_are_not_created(store):
    assert store.find("attacker-chosen") is None
    assert store.find("") is None
    assert store.find(None) is None
    assert len(store) == 0


def test_sessions_do_not_share_state(store):
    a, b = store.create(), store.create()
    a.token_info = {"access_token": "t"}
    a.document = [make_playlist("Mine", 2)]
    assert b.token_info is None
    assert b.document == []


def test_drop(store):
    session = store.create()
    store.drop(session.session_id)
    assert store.find(session.session_id) is None
    assert len(store) == 0


def test_idle_session_expires(store, clock):
    session = store.create()
    clock.now += 61
    assert store.find(session.session_id) is None
    assert len(store) == 0


def test_activity_keeps_session_alive(store, clock):
    session = store.create()
    for _ in range(5):
        clock.now += 50
        assert store.find(session.session_id) is session


def test_create_purges_expired(store, clock):
    for _ in range(10):
        store.create()
    clock.now += 120
    store.create()
    assert len(store) == 1


def test_anonymous_session_is_not_stored():
    session = Session()
    assert not session.stored
    assert not session.logged_in
