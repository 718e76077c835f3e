from datetime import datetime, timedelta, timezone

import pytest

from passkey_server.exceptions import EngineFailure
from passkey_server.schema import CredentialRecord, Flow
from passkey_server.store import PasskeyStore


def make_record(username="testuser", credential_id=b"cred"):
    return CredentialRecord(
        credential_id=credential_id,
        public_key=b"key",
        user_handle=b"1234",
        username=username,
    )


def test_challenge_slots_are_per_flow(store):
    store.set_challenge(Flow.REGISTRATION, b"reg")
    store.set_challenge(Flow.LOGIN, b"login")

    assert store.current_challenge(Flow.REGISTRATION) == b"reg"
    assert store.current_challenge(Flow.LOGIN) == b"login"


def test_last_challenge_wins(store):
    store.set_challenge(Flow.LOGIN, b"first")
    store.set_challenge(Flow.LOGIN, b"second")

    assert store.current_challenge(Flow.LOGIN) == b"second"
    # reading does not consume
    assert store.current_challenge(Flow.LOGIN) == b"second"


def test_missing_challenge(store):
    with pytest.raises(EngineFailure, match="No login challenge"):
        store.current_challenge(Flow.LOGIN)


def test_stale_challenge(store):
    issued = store.set_challenge(Flow.REGISTRATION, b"reg")
    issued.issued_at = datetime.now(timezone.utc) - timedelta(seconds=61)

    with pytest.raises(EngineFailure, match="expired"):
        store.current_challenge(Flow.REGISTRATION, max_age_ms=60000)
    assert store.current_challenge(Flow.REGISTRATION) == b"reg"


def test_credential_overwrite(store):
    store.save_credential(make_record(credential_id=b"one"))
    store.save_credential(make_record(credential_id=b"two"))

    assert store.get_credential("testuser").credential_id == b"two"
    assert store.get_credential("nobody") is None


def test_update_sign_count(store):
    store.save_credential(make_record())

    updated = store.update_sign_count("testuser", 7)

    assert updated.sign_count == 7
    assert updated.last_used_at is not None
    assert store.get_credential("testuser").sign_count == 7


def test_stores_are_isolated(store):
    store.save_credential(make_record())

    assert PasskeyStore().get_credential("testuser") is None
