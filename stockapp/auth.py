"""
Credential gate: login and signup against the single local account.
"""

import threading
import logging
from typing import Optional

from .crypto import CryptoManager
from .outcomes import Outcome, Reason
from . import config

logger = logging.getLogger(__name__)


def has_allowed_domain(email: str) -> bool:
    """Check the email ends with the required domain, exactly as typed."""
    return email.endswith(config.ALLOWED_EMAIL_DOMAIN)


class AuthGate:
    """
    Validates login and signup forms and reads/writes the stored credential.

    Only one attempt runs at a time. A submission that arrives while another
    is in flight is ignored and returns None.
    """

    def __init__(self, store, crypto: Optional[CryptoManager] = None):
        """
        Args:
            store: Secure key-value store with get(key) and update(mapping); any
                exception it raises is reported as storage_error
            crypto: Digest provider; a new CryptoManager by default
        """
        self.store = store
        self.crypto = crypto or CryptoManager()
        self._busy = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._busy.locked()

    def login(self, email: str, password: str) -> Optional[Outcome]:
        """
        Check an email/password pair against the stored account.

        Returns:
            Accepted, or Rejected with invalid_email_domain, invalid_credentials
            or storage_error. None if another attempt is still running.
        """
        if not self._busy.acquire(blocking=False):
            logger.debug("Login submission ignored, gate is busy")
            return None
        try:
            if not has_allowed_domain(email):
                return Outcome.rejected(Reason.INVALID_EMAIL_DOMAIN)

            try:
                stored_email = self.store.get(config.STORE_KEY_EMAIL)
                stored_digest = self.store.get(config.STORE_KEY_PASSWORD)
            except Exception as e:
                logger.error(f"Login: failed to read stored credential: {e}", exc_info=True)
                return Outcome.rejected(Reason.STORAGE_ERROR)

            password_digest = self.crypto.digest(password)

            # No account yet and wrong password are reported the same way
            if not stored_email or not stored_digest:
                return Outcome.rejected(Reason.INVALID_CREDENTIALS)
            if email != stored_email or not self.crypto.secure_compare(password_digest, stored_digest):
                return Outcome.rejected(Reason.INVALID_CREDENTIALS)

            logger.info("Login accepted")
            return Outcome.accepted(email)
        finally:
            self._busy.release()

    def register(self, email: str, password: str, confirm_password: str) -> Optional[Outcome]:
        """
        Create the account, replacing any existing one.

        Returns:
            Created, or Rejected with the first failing check:
            invalid_email_domain, password_mismatch, password_too_short,
            then storage_error. None if another attempt is still running.
        """
        if not self._busy.acquire(blocking=False):
            logger.debug("Signup submission ignored, gate is busy")
            return None
        try:
            if not has_allowed_domain(email):
                return Outcome.rejected(Reason.INVALID_EMAIL_DOMAIN)
            if password != confirm_password:
                return Outcome.rejected(Reason.PASSWORD_MISMATCH)
            if len(password) < config.PASSWORD_MIN_LENGTH:
                return Outcome.rejected(Reason.PASSWORD_TOO_SHORT)

            password_digest = self.crypto.digest(password)
            try:
                self.store.update({
                    config.STORE_KEY_EMAIL: email,
                    config.STORE_KEY_PASSWORD: password_digest,
                })
            except Exception as e:
                logger.error(f"Signup: failed to write credential: {e}", exc_info=True)
                return Outcome.rejected(Reason.STORAGE_ERROR)

            logger.info("Account created")
            return Outcome.created(email)
        finally:
            self._busy.release()
