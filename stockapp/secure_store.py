"""
Local secure key-value store for the account credential.

Values are kept in a single AES-256-GCM encrypted file. The key is generated
on first write and kept in the OS keychain through keyring, never on disk.
"""

import os
import json
import struct
import shutil
import base64
import hashlib
import threading
import logging
from typing import Dict, Optional

import keyring
from keyring.errors import KeyringError
from cryptography.exceptions import InvalidTag

from .crypto import CryptoManager
from .utils import set_owner_only_permissions
from . import config

logger = logging.getLogger(__name__)


class SecureStoreError(Exception):
    """Raised when the secure store cannot be read or written."""


class SecureStore:
    """Encrypted get/set of named string values."""

    VERSION = 1
    MAGIC_BYTES = b'STKS'  # StockApp Key Store

    def __init__(self, filepath: str, service: str = config.KEYRING_SERVICE):
        """
        Initialize the secure store.
        Args:
            filepath: Path to the encrypted store file
            service: Keychain service name the store key is filed under
        """
        self.filepath = filepath
        self.service = service
        self.key_name = f"{config.KEYRING_KEY_PREFIX}{self._get_store_id()}"
        self.crypto = CryptoManager()
        self._lock = threading.Lock()

    def _get_store_id(self) -> str:
        """Get a unique ID for this store based on its path."""
        return hashlib.sha256(os.path.abspath(self.filepath).encode()).hexdigest()[:16]

    @classmethod
    def default(cls) -> 'SecureStore':
        """Open the store in the user's data directory."""
        data_dir = config.get_data_dir()
        os.makedirs(data_dir, exist_ok=True)
        return cls(os.path.join(data_dir, config.SECURE_STORE_FILE))

    def get(self, key: str) -> Optional[str]:
        """
        Return the value stored under key, or None if absent.
        Raises:
            SecureStoreError: If the store exists but cannot be read or decrypted
        """
        with self._lock:
            return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        """
        Store value under key, replacing any previous value.
        Raises:
            SecureStoreError: If the store cannot be read or written
        """
        self.update({key: value})

    def update(self, values: Dict[str, str]) -> None:
        """
        Store several values in one atomic write; either all are stored or none.
        Raises:
            SecureStoreError: If the store cannot be read or written
        """
        with self._lock:
            data = self._load()
            data.update(values)
            self._save(data)

    def _read_key(self, create: bool) -> Optional[bytes]:
        try:
            encoded = keyring.get_password(self.service, self.key_name)
        except KeyringError as e:
            raise SecureStoreError(f"Keychain unavailable: {e}") from e

        if encoded is not None:
            try:
                key = base64.b64decode(encoded, validate=True)
            except ValueError as e:
                raise SecureStoreError(f"Keychain entry {self.key_name} is corrupt") from e
            if len(key) != self.crypto.KEY_SIZE:
                raise SecureStoreError(f"Keychain entry {self.key_name} is corrupt")
            return key
        if not create:
            return None

        key = self.crypto.generate_key()
        try:
            keyring.set_password(self.service, self.key_name, base64.b64encode(key).decode('ascii'))
        except KeyringError as e:
            raise SecureStoreError(f"Failed to store key in keychain: {e}") from e
        logger.info(f"Generated new secure store key {self.key_name}")
        return key

    def _load(self) -> Dict[str, str]:
        if not os.path.exists(self.filepath):
            return {}

        try:
            key = self._read_key(create=False)
            if key is None:
                raise SecureStoreError(f"Keychain entry {self.key_name} is missing")

            with open(self.filepath, 'rb') as f:
                magic = f.read(4)
                if magic != self.MAGIC_BYTES:
                    raise SecureStoreError(f"Magic bytes mismatch. Expected {self.MAGIC_BYTES}, got {magic}")

                version = struct.unpack('<I', f.read(4))[0]
                if version != self.VERSION:
                    raise SecureStoreError(f"Version mismatch. Expected {self.VERSION}, got {version}")

                nonce_size = struct.unpack('<I', f.read(4))[0]
                nonce = f.read(nonce_size)

                tag_size = struct.unpack('<I', f.read(4))[0]
                tag = f.read(tag_size)

                ciphertext_size = struct.unpack('<I', f.read(4))[0]
                ciphertext = f.read(ciphertext_size)

            plaintext = self.crypto.decrypt(ciphertext, key, nonce, tag)
            data = json.loads(plaintext.decode('utf-8'))
        except SecureStoreError:
            raise
        except (OSError, struct.error, ValueError, InvalidTag) as e:
            logger.error(f"Error reading secure store {self.filepath}: {e}", exc_info=True)
            raise SecureStoreError(f"Failed to read secure store: {e}") from e

        if not isinstance(data, dict):
            raise SecureStoreError("Secure store payload is not a mapping")
        return data

    def _save(self, data: Dict[str, str]) -> None:
        tmp_path = self.filepath + '.tmp'
        try:
            key = self._read_key(create=True)
            plaintext = json.dumps(data).encode('utf-8')
            ciphertext, nonce, tag = self.crypto.encrypt(plaintext, key)

            os.makedirs(os.path.dirname(self.filepath) or '.', exist_ok=True)
            with open(tmp_path, 'wb') as f:
                # Header
                f.write(self.MAGIC_BYTES)
                f.write(struct.pack('<I', self.VERSION))

                # Nonce
                f.write(struct.pack('<I', len(nonce)))
                f.write(nonce)

                # Tag
                f.write(struct.pack('<I', len(tag)))
                f.write(tag)

                # Ciphertext
                f.write(struct.pack('<I', len(ciphertext)))
                f.write(ciphertext)

            # Atomic replace using shutil.move
            shutil.move(tmp_path, self.filepath)
            set_owner_only_permissions(self.filepath)

        except OSError as e:
            logger.error(f"Error saving secure store {self.filepath}: {e}", exc_info=True)
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise SecureStoreError(f"Failed to write secure store: {e}") from e
