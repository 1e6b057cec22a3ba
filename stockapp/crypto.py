"""
Cryptographic operations for StockApp.

Provides the one-way password digest used by the credential gate and the
authenticated encryption used by the local secure store.
"""

import os
from typing import Tuple
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives import hashes, constant_time
from cryptography.hazmat.backends import default_backend

from . import config


def digest(secret: str) -> str:
    """
    Hash a secret into a fixed-length hex string.

    Args:
        secret: Any string, including the empty string

    Returns:
        64-character lower-case SHA-256 hex digest
    """
    h = hashes.Hash(hashes.SHA256(), backend=default_backend())
    h.update(secret.encode('utf-8'))
    return h.finalize().hex()


class CryptoManager:
    """Handles all cryptographic operations for the application."""

    KEY_SIZE = config.KEY_SIZE
    NONCE_SIZE = config.NONCE_SIZE

    def __init__(self):
        """Initialize the crypto manager."""
        self.backend = default_backend()

    def digest(self, secret: str) -> str:
        return digest(secret)

    def generate_key(self) -> bytes:
        """Generate a cryptographically secure random AES-256 key."""
        return os.urandom(self.KEY_SIZE)

    def encrypt(self, plaintext: bytes, key: bytes) -> Tuple[bytes, bytes, bytes]:
        """
        Encrypt data using AES-256-GCM.

        Args:
            plaintext: Data to encrypt
            key: 32-byte encryption key

        Returns:
            Tuple of (ciphertext, nonce, tag)
        """
        nonce = os.urandom(self.NONCE_SIZE)
        cipher = Cipher(
            algorithms.AES(key),
            modes.GCM(nonce),
            backend=self.backend
        )
        encryptor = cipher.encryptor()
        ciphertext = encryptor.update(plaintext) + encryptor.finalize()
        return ciphertext, nonce, encryptor.tag

    def decrypt(self, ciphertext: bytes, key: bytes, nonce: bytes, tag: bytes) -> bytes:
        """
        Decrypt data using AES-256-GCM.

        Raises:
            InvalidTag: If authentication fails
        """
        cipher = Cipher(
            algorithms.AES(key),
            modes.GCM(nonce, tag),
            backend=self.backend
        )
        decryptor = cipher.decryptor()
        return decryptor.update(ciphertext) + decryptor.finalize()

    def secure_compare(self, a: str, b: str) -> bool:
        """Constant-time comparison to prevent timing attacks."""
        return constant_time.bytes_eq(a.encode('utf-8'), b.encode('utf-8'))
