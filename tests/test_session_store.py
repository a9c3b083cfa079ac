"""Session store tests."""
from datetime import timedelta

from coachdesk.models.session import UserSession
from coachdesk.services.session_store import SessionStore
from coachdesk.utils.helpers import utcnow


def _store(db_session, user, token):
    SessionStore.create(db_session, token=token, user_id=user.id, expires_at=utcnow() + timedelta(days=7))
    db_session.commit()


def test_create_and_find(db_session, make_user):
    user = make_user()
    _store(db_session, user, "token-a")

    found = SessionStore.find_by_token(db_session, "token-a")

    assert found is not None
    assert found.user_id == user.id
    assert SessionStore.find_by_token(db_session, "token-unknown") is None


def test_raw_token_is_not_persisted(db_session, make_user):
    user = make_user()
    _store(db_session, user, "raw-token-value")

    rows = db_session.query(UserSession).filter(UserSession.user_id == user.id).all()

    assert len(rows) == 1
    assert rows[0].token_hash != "raw-token-value"


def test_delete_by_token_is_idempotent(db_session, make_user):
    user = make_user()
    _store(db_session, user, "token-b")

    assert SessionStore.delete_by_token(db_session, "token-b") == 1
    assert SessionStore.delete_by_token(db_session, "token-b") == 0
    db_session.commit()
    assert SessionStore.find_by_token(db_session, "token-b") is None


def test_delete_all_for_user_leaves_other_users(db_session, make_user):
    alice, bob = make_user(), make_user()
    _store(db_session, alice, "alice-1")
    _store(db_session, alice, "alice-2")
    _store(db_session, bob, "bob-1")

    assert SessionStore.delete_all_for_user(db_session, alice.id) == 2
    db_session.commit()

    assert SessionStore.find_by_token(db_session, "alice-1") is None
    assert SessionStore.find_by_token(db_session, "alice-2") is None
    assert SessionStore.find_by_token(db_session, "bob-1") is not None


def test_consume_succeeds_once(db_session, make_user):
    user = make_user()
    _store(db_session, user, "token-c")

    first = SessionStore.consume(db_session, "token-c")
    second = SessionStore.consume(db_session, "token-c")
    db_session.commit()

    assert first is not None
    assert first.user_id == user.id
    assert second is None
    assert SessionStore.find_by_token(db_session, "token-c") is None
