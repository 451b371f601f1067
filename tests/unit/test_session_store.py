from unittest.mock import MagicMock

from methods.guard.challenge import Challenge
from methods.guard.session import FormSession
from methods.manager.SessionManager import CLAIM_TTL, FormSessionStore


def _store():
    r = MagicMock()
    pipe = MagicMock()
    r.pipeline.return_value = pipe
    return FormSessionStore(r=r, ttl=90), r, pipe


def test_save_writes_hash_and_ttl():
    store, r, pipe = _store()
    s = FormSession(session_id="abc", challenge=Challenge("3 + 4 = ?", "7", "arithmetic"), opened_at=50.0)
    store.save(s)
    pipe.hset.assert_called_once_with(
        "form:abc",
        mapping={"prompt": "3 + 4 = ?", "answer": "7", "kind": "arithmetic", "started_at": "", "opened_at": "50.0"},
    )
    pipe.expire.assert_called_once_with("form:abc", 90)
    pipe.execute.assert_called_once()


def test_load_rebuilds_session():
    store, r, _ = _store()
    r.hgetall.return_value = {"prompt": 'Type the word "Lens"', "answer": "Lens", "kind": "word", "started_at": "12.5",
                                "opened_at": "10.0"}
    s = store.load("abc")
    r.hgetall.assert_called_once_with("form:abc")
    assert s.session_id == "abc"
    assert s.challenge == Challenge('Type the word "Lens"', "Lens", "word")
    assert s.started_at == 12.5
    assert s.opened_at == 10.0


def test_load_missing_or_partial_returns_none():
    store, r, _ = _store()
    r.hgetall.return_value = {}
    assert store.load("gone") is None
    r.hgetall.return_value = {"prompt": "x"}
    assert store.load("half") is None


def test_delete_removes_key():
    store, r, _ = _store()
    store.delete("abc")
    r.delete.assert_called_once_with("form:abc", "form:abc:claim")


def test_set_stringifies_values():
    store, _, pipe = _store()
    store.set("k", {"a": 1, "b": None})
    pipe.hset.assert_called_once_with("form:k", mapping={"a": "1", "b": ""})


def test_claim_is_set_nx_with_short_expiry():
    store, r, _ = _store()
    r.set.return_value = True
    assert store.claim("abc") is True
    r.set.assert_called_once_with("form:abc:claim", "1", nx=True, ex=CLAIM_TTL)

    r.set.return_value = None
    assert store.claim("abc") is False


def test_release_drops_only_the_claim():
    store, r, _ = _store()
    store.release("abc")
    r.delete.assert_called_once_with("form:abc:claim")
