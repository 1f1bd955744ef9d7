"""Business flows built on the repositories."""

from .auth import AuthenticationService
from .credentials import (
    HashedCredential,
    LegacyCredential,
    Pbkdf2Credential,
    hash_password,
    needs_upgrade,
    parse_credential,
    pwd_context,
    verify_credential,
    verify_password,
)
from .grades import GradeAggregator, average_of, is_valid_mark, mark_points
from .registration import RegistrationService

__all__ = [
    "AuthenticationService",
    "RegistrationService",
    "GradeAggregator",
    "HashedCredential",
    "Pbkdf2Credential",
    "LegacyCredential",
    "parse_credential",
    "verify_credential",
    "verify_password",
    "needs_upgrade",
    "hash_password",
    "pwd_context",
    "is_valid_mark",
    "mark_points",
    "average_of",
]
