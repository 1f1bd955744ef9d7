"""Stored credential formats and password hashing.

A ``User.password`` value is one of three things:

HashedCredential   a passlib hash: ``$argon2id$...`` (current) or
                   ``$pbkdf2-sha256$...`` (accepted, flagged for upgrade)
Pbkdf2Credential   ``iterations:salt:hash`` with base64 salt and hash,
                   PBKDF2-HMAC-SHA1 (written by the old desktop client)
LegacyCredential   plaintext from before hashing was introduced

Every format verifies; only an argon2 hash with the current parameters is
left alone after a successful login.
"""

import base64
import binascii
import hashlib
import hmac
from dataclasses import dataclass
from typing import Union

from passlib.context import CryptContext

from classbook.logutils import get_logger

logger = get_logger(__name__)

pwd_context = CryptContext(
    schemes=["argon2", "pbkdf2_sha256"],
    deprecated=["pbkdf2_sha256"],
    argon2__rounds=10,
    argon2__memory_cost=1024,
    argon2__parallelism=2,
)


@dataclass(frozen=True)
class HashedCredential:
    scheme: str
    hash: str


@dataclass(frozen=True)
class Pbkdf2Credential:
    iterations: int
    salt: bytes
    digest: bytes


@dataclass(frozen=True, repr=False)
class LegacyCredential:
    plaintext: str

    def __repr__(self) -> str:
        return "LegacyCredential(plaintext='***')"


Credential = Union[HashedCredential, Pbkdf2Credential, LegacyCredential]


def _parse_pbkdf2(stored: str) -> Union[Pbkdf2Credential, None]:
    parts = stored.split(":")
    if len(parts) != 3 or not parts[0].isdigit():
        return None
    try:
        salt = base64.b64decode(parts[1], validate=True)
        digest = base64.b64decode(parts[2], validate=True)
    except (binascii.Error, ValueError):
        return None
    if not salt or not digest:
        return None
    return Pbkdf2Credential(int(parts[0]), salt, digest)


def parse_credential(stored: str) -> Credential:
    """Classify a stored password value."""
    scheme = pwd_context.identify(stored)
    if scheme is not None:
        return HashedCredential(scheme, stored)
    pbkdf2 = _parse_pbkdf2(stored)
    if pbkdf2 is not None:
        return pbkdf2
    return LegacyCredential(stored)


def verify_credential(credential: Credential, password: str) -> bool:
    """Check ``password`` against a parsed credential in constant time."""
    if isinstance(credential, HashedCredential):
        try:
            return pwd_context.verify(password, credential.hash)
        except ValueError as e:
            logger.warning(
                "Malformed password hash",
                extra={"extra_data": {"scheme": credential.scheme, "error": str(e)}},
            )
            return False
    if isinstance(credential, Pbkdf2Credential):
        candidate = hashlib.pbkdf2_hmac(
            "sha1",
            password.encode("utf-8"),
            credential.salt,
            credential.iterations,
            dklen=len(credential.digest),
        )
        return hmac.compare_digest(candidate, credential.digest)
    return hmac.compare_digest(password.encode("utf-8"), credential.plaintext.encode("utf-8"))


def needs_upgrade(credential: Credential) -> bool:
    """True unless the credential is an argon2 hash with current parameters."""
    if isinstance(credential, HashedCredential):
        return pwd_context.needs_update(credential.hash)
    return True


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(stored: str, password: str) -> bool:
    """Verify ``password`` against any supported stored format."""
    return verify_credential(parse_credential(stored), password)
