"""Error taxonomy for the classbook persistence layer.

ValidationError    a business rule failed before any write was attempted
PersistenceError   the store rejected or failed to execute a statement
NotFoundError      a lookup by id or email found no row
InvalidCredentialsError
                   authentication rejected; the message shown to end users
                   never says whether the email or the password was wrong
"""

from typing import Optional


class ClassbookError(Exception):
    """Base class for all errors raised by classbook."""


class ValidationError(ClassbookError, ValueError):
    """A business rule failed; nothing was written."""


class PersistenceError(ClassbookError):
    """The store failed or refused a statement."""


class NotFoundError(ClassbookError):
    """No row matched the lookup key."""


class InvalidCredentialsError(ClassbookError):
    """Authentication failed.

    ``str(error)`` is always the generic ``public_message``; ``reason`` keeps
    the internal cause for logging.
    """

    public_message = "Invalid email or password"
    reason = "invalid_credentials"

    def __init__(self, email: Optional[str] = None) -> None:
        super().__init__(self.public_message)
        self.email = email


class UnknownAccountError(InvalidCredentialsError, NotFoundError):
    """No user is registered under the supplied email."""

    reason = "unknown_email"


class WrongPasswordError(InvalidCredentialsError):
    """The user exists but the password does not match."""

    reason = "wrong_password"
