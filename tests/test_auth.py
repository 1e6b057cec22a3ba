import keyring
import pytest
from keyring.backends import fail

from stockapp.auth import AuthGate, has_allowed_domain
from stockapp.crypto import digest
from stockapp.outcomes import Reason, Status

from conftest import FakeStore


@pytest.fixture
def gate(fake_store):
    return AuthGate(fake_store)


def stored_account(email="a@gmail.com", password="x"):
    return FakeStore({"user_email": email, "user_password": digest(password)})


def test_domain_check_is_exact_suffix():
    assert has_allowed_domain("a@gmail.com")
    assert not has_allowed_domain("a@GMAIL.com")
    assert not has_allowed_domain("a@gmail.com ")
    assert not has_allowed_domain("a@hotmail.com")


@pytest.mark.parametrize("email", ["teste@hotmail.com", "a@gmail.co", ""])
def test_login_rejects_wrong_domain_without_reading_store(email):
    store = stored_account()
    outcome = AuthGate(store).login(email, "x")

    assert outcome.reason is Reason.INVALID_EMAIL_DOMAIN
    assert store.reads == 0


def test_login_accepts_matching_credential():
    outcome = AuthGate(stored_account()).login("a@gmail.com", "x")
    assert outcome.ok
    assert outcome.status is Status.ACCEPTED


def test_login_rejects_wrong_password():
    outcome = AuthGate(stored_account()).login("a@gmail.com", "y")
    assert outcome.reason is Reason.INVALID_CREDENTIALS


def test_login_rejects_other_email():
    outcome = AuthGate(stored_account()).login("b@gmail.com", "x")
    assert outcome.reason is Reason.INVALID_CREDENTIALS


def test_login_without_account_looks_like_wrong_password(gate):
    outcome = gate.login("a@gmail.com", "")
    assert outcome.reason is Reason.INVALID_CREDENTIALS


def test_login_reports_storage_error():
    store = stored_account()
    store.fail = True
    outcome = AuthGate(store).login("a@gmail.com", "x")
    assert outcome.reason is Reason.STORAGE_ERROR


def test_login_while_busy_is_ignored():
    store = stored_account()
    gate = AuthGate(store)
    nested = []

    original_get = store.get

    def reentrant_get(key):
        nested.append(gate.login("a@gmail.com", "x"))
        return original_get(key)

    store.get = reentrant_get
    outcome = gate.login("a@gmail.com", "x")

    assert outcome.ok
    assert nested == [None, None]
    assert not gate.busy


def test_register_then_login(gate):
    created = gate.register("a@gmail.com", "abc123", "abc123")
    assert created.status is Status.CREATED
    assert gate.login("a@gmail.com", "abc123").ok


def test_register_stores_digest_not_plaintext(gate, fake_store):
    gate.register("a@gmail.com", "abc123", "abc123")
    assert fake_store.values == {"user_email": "a@gmail.com", "user_password": digest("abc123")}


def test_register_replaces_previous_account(gate):
    gate.register("a@gmail.com", "abc123", "abc123")
    gate.register("b@gmail.com", "zzz999", "zzz999")

    assert gate.login("a@gmail.com", "abc123").reason is Reason.INVALID_CREDENTIALS
    assert gate.login("b@gmail.com", "zzz999").ok


@pytest.mark.parametrize("args, reason", [
    (("a@hotmail.com", "ab", "cd"), Reason.INVALID_EMAIL_DOMAIN),
    (("a@gmail.com", "abcdef", "abcxyz"), Reason.PASSWORD_MISMATCH),
    (("a@gmail.com", "ab", "cd"), Reason.PASSWORD_MISMATCH),
    (("a@gmail.com", "ab", "ab"), Reason.PASSWORD_TOO_SHORT),
])
def test_register_first_failure_wins(gate, fake_store, args, reason):
    outcome = gate.register(*args)
    assert outcome.reason is reason
    assert fake_store.values == {}


def test_register_accepts_exactly_minimum_length(gate):
    assert gate.register("a@gmail.com", "123456", "123456").ok


def test_register_reports_storage_error(gate, fake_store):
    fake_store.fail = True
    outcome = gate.register("a@gmail.com", "abc123", "abc123")
    assert outcome.reason is Reason.STORAGE_ERROR
    assert not gate.busy


class LockedKeychainStore:
    """Store whose backend fails with an arbitrary exception type."""

    def get(self, key):
        raise RuntimeError("keychain locked")

    def update(self, values):
        raise RuntimeError("keychain locked")


class GetSetOnlyStore:
    """Store without update(); registration cannot write through it."""

    def __init__(self):
        self.values = {}

    def get(self, key):
        return self.values.get(key)

    def set(self, key, value):
        self.values[key] = value


def test_unexpected_store_exception_on_login_is_storage_error():
    gate = AuthGate(LockedKeychainStore())
    outcome = gate.login("a@gmail.com", "abc123")
    assert outcome.reason is Reason.STORAGE_ERROR
    assert not gate.busy


def test_unexpected_store_exception_on_register_is_storage_error():
    gate = AuthGate(LockedKeychainStore())
    outcome = gate.register("a@gmail.com", "abc123", "abc123")
    assert outcome.reason is Reason.STORAGE_ERROR
    assert not gate.busy
    assert gate.register("a@gmail.com", "abc123", "abc123") is not None


def test_register_with_store_missing_update_is_storage_error():
    store = GetSetOnlyStore()
    gate = AuthGate(store)
    outcome = gate.register("a@gmail.com", "abc123", "abc123")
    assert outcome.reason is Reason.STORAGE_ERROR
    assert store.values == {}
    assert not gate.busy


def test_unavailable_keychain_is_storage_error(file_store):
    keyring.set_keyring(fail.Keyring())
    gate = AuthGate(file_store)
    assert gate.register("a@gmail.com", "abc123", "abc123").reason is Reason.STORAGE_ERROR


def test_register_and_login_against_file_store(file_store):
    gate = AuthGate(file_store)
    assert gate.register("a@gmail.com", "abc123", "abc123").ok
    assert AuthGate(file_store).login("a@gmail.com", "abc123").ok


def test_rejection_messages():
    outcome = AuthGate(FakeStore()).login("a@hotmail.com", "x")
    assert outcome.message == "Email must end with @gmail.com"
