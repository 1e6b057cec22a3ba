"""
Account details shown on the profile tab.
"""

import logging
from dataclasses import dataclass

from . import config

logger = logging.getLogger(__name__)


def username(email: str) -> str:
    """Local part of the email, or a placeholder when no account exists."""
    if not email:
        return config.PROFILE_DEFAULT_USERNAME
    return email.split('@')[0]


def mask_email(email: str) -> str:
    """Hide the middle of the local part, e.g. jo****va@gmail.com."""
    if not email:
        return config.PROFILE_MASKED_EMPTY
    local, _, domain = email.partition('@')
    masked = local[:2] + '****' + local[-2:]
    return f"{masked}@{domain}"


@dataclass
class AccountProfile:
    email: str = ""

    @classmethod
    def load(cls, store) -> 'AccountProfile':
        """Read the account email from the store; empty if absent or unreadable."""
        try:
            email = store.get(config.STORE_KEY_EMAIL)
        except Exception as e:
            logger.warning(f"Profile: failed to read account email: {e}", exc_info=True)
            email = None
        return cls(email=email or "")

    @property
    def username(self) -> str:
        return username(self.email)

    @property
    def masked_email(self) -> str:
        return mask_email(self.email)

    def display_email(self, show_full: bool) -> str:
        return self.email if show_full else self.masked_email
