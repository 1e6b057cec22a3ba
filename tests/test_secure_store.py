import base64
import os
import platform
import stat

import keyring
import pytest
from keyring.backends import fail

from stockapp.secure_store import SecureStore, SecureStoreError


def test_missing_store_reads_as_absent(file_store):
    assert file_store.get("user_email") is None


def test_values_survive_a_new_instance(file_store, tmp_path):
    file_store.set("user_email", "a@gmail.com")
    file_store.update({"user_password": "d1", "other": "v"})

    reopened = SecureStore(str(tmp_path / "secure_store.enc"))
    assert reopened.get("user_email") == "a@gmail.com"
    assert reopened.get("user_password") == "d1"
    assert reopened.get("other") == "v"


def test_set_overwrites_previous_value(file_store):
    file_store.set("user_email", "a@gmail.com")
    file_store.set("user_email", "b@gmail.com")
    assert file_store.get("user_email") == "b@gmail.com"


def test_file_does_not_contain_plaintext(file_store):
    file_store.set("user_email", "plain@gmail.com")
    with open(file_store.filepath, 'rb') as f:
        content = f.read()
    assert content.startswith(SecureStore.MAGIC_BYTES)
    assert b"plain@gmail.com" not in content


@pytest.mark.skipif(platform.system() == "Windows", reason="POSIX permissions")
def test_store_file_is_owner_only(file_store):
    file_store.set("k", "v")
    assert stat.S_IMODE(os.stat(file_store.filepath).st_mode) == 0o600


def test_key_lives_in_keychain_not_on_disk(file_store, tmp_path, memory_keyring):
    file_store.set("user_email", "a@gmail.com")

    assert os.listdir(tmp_path) == ["secure_store.enc"]
    encoded = memory_keyring.get_password("StockApp", file_store.key_name)
    assert len(base64.b64decode(encoded)) == 32


def test_stores_at_different_paths_use_different_keys(tmp_path):
    first = SecureStore(str(tmp_path / "a.enc"))
    second = SecureStore(str(tmp_path / "b.enc"))
    assert first.key_name != second.key_name
    assert first.key_name.startswith("stockapp_store_")


def test_tampered_file_raises(file_store):
    file_store.set("user_email", "a@gmail.com")
    with open(file_store.filepath, 'r+b') as f:
        f.seek(-1, os.SEEK_END)
        last = f.read(1)
        f.seek(-1, os.SEEK_END)
        f.write(bytes([last[0] ^ 0xFF]))

    with pytest.raises(SecureStoreError):
        file_store.get("user_email")


def test_bad_magic_raises(file_store):
    with open(file_store.filepath, 'wb') as f:
        f.write(b"JUNKJUNKJUNK")
    file_store._read_key(create=True)

    with pytest.raises(SecureStoreError):
        file_store.get("user_email")


def test_missing_keychain_entry_raises(file_store):
    file_store.set("user_email", "a@gmail.com")
    keyring.delete_password(file_store.service, file_store.key_name)

    with pytest.raises(SecureStoreError):
        file_store.get("user_email")


def test_corrupt_keychain_entry_raises(file_store, memory_keyring):
    file_store.set("user_email", "a@gmail.com")
    memory_keyring.set_password(file_store.service, file_store.key_name, "not base64!")

    with pytest.raises(SecureStoreError):
        file_store.get("user_email")


def test_unavailable_keychain_raises_store_error(file_store):
    keyring.set_keyring(fail.Keyring())

    with pytest.raises(SecureStoreError):
        file_store.set("user_email", "a@gmail.com")
    assert not os.path.exists(file_store.filepath)


def test_unavailable_keychain_on_read_raises_store_error(file_store):
    file_store.set("user_email", "a@gmail.com")
    keyring.set_keyring(fail.Keyring())

    with pytest.raises(SecureStoreError):
        file_store.get("user_email")


def test_default_store_uses_env_override(tmp_path, monkeypatch):
    monkeypatch.setenv("STOCKAPP_HOME", str(tmp_path / "home"))
    store = SecureStore.default()
    assert store.filepath == str(tmp_path / "home" / "secure_store.enc")
    assert os.path.isdir(tmp_path / "home")
