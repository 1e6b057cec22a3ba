import keyring
import pytest
from keyring.backend import KeyringBackend
from keyring.errors import PasswordDeleteError

from stockapp.secure_store import SecureStore, SecureStoreError


class MemoryKeyring(KeyringBackend):
    """Keyring backend that keeps passwords in a dict."""

    priority = 1

    def __init__(self):
        super().__init__()
        self.passwords = {}

    def get_password(self, service, username):
        return self.passwords.get((service, username))

    def set_password(self, service, username, password):
        self.passwords[(service, username)] = password

    def delete_password(self, service, username):
        if (service, username) not in self.passwords:
            raise PasswordDeleteError("not found")
        del self.passwords[(service, username)]


class FakeStore:
    """In-memory key-value store that can be told to fail."""

    def __init__(self, values=None):
        self.values = dict(values or {})
        self.fail = False
        self.reads = 0

    def get(self, key):
        self.reads += 1
        if self.fail:
            raise SecureStoreError("store unavailable")
        return self.values.get(key)

    def set(self, key, value):
        self.update({key: value})

    def update(self, values):
        if self.fail:
            raise SecureStoreError("store unavailable")
        self.values.update(values)


class RecordingNotifier:
    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    def schedule_immediate(self, title, body):
        if self.fail:
            raise RuntimeError("notifications disabled")
        self.sent.append((title, body))


class RecordingHaptics:
    def __init__(self, fail=False):
        self.pulses = 0
        self.fail = fail

    def pulse(self):
        if self.fail:
            raise RuntimeError("no vibrator")
        self.pulses += 1


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def file_store(tmp_path):
    return SecureStore(str(tmp_path / "secure_store.enc"))


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def haptics():
    return RecordingHaptics()


@pytest.fixture(autouse=True)
def memory_keyring():
    previous = keyring.get_keyring()
    backend = MemoryKeyring()
    keyring.set_keyring(backend)
    yield backend
    keyring.set_keyring(previous)
