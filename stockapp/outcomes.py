"""
Typed results returned by the credential gate and the product repository.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Any, Optional

from . import config


class Reason(str, Enum):
    """Why an operation was rejected. Every reason is recoverable by retrying."""
    INVALID_EMAIL_DOMAIN = "invalid_email_domain"
    INVALID_CREDENTIALS = "invalid_credentials"
    PASSWORD_MISMATCH = "password_mismatch"
    PASSWORD_TOO_SHORT = "password_too_short"
    VALIDATION_ERROR = "validation_error"
    NOT_FOUND = "not_found"
    STORAGE_ERROR = "storage_error"


class Status(str, Enum):
    ACCEPTED = "accepted"
    CREATED = "created"
    UPDATED = "updated"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Outcome:
    """Result of a core operation: a success status with an optional value, or a rejection reason."""
    status: Status
    reason: Optional[Reason] = None
    value: Any = None

    @classmethod
    def accepted(cls, value: Any = None) -> 'Outcome':
        return cls(Status.ACCEPTED, value=value)

    @classmethod
    def created(cls, value: Any = None) -> 'Outcome':
        return cls(Status.CREATED, value=value)

    @classmethod
    def updated(cls, value: Any = None) -> 'Outcome':
        return cls(Status.UPDATED, value=value)

    @classmethod
    def rejected(cls, reason: Reason) -> 'Outcome':
        return cls(Status.REJECTED, reason=reason)

    @property
    def ok(self) -> bool:
        return self.status is not Status.REJECTED

    @property
    def message(self) -> str:
        """User-facing text for a rejection, empty for a success."""
        if self.reason is None:
            return ""
        return config.REASON_MESSAGES[self.reason.value]
