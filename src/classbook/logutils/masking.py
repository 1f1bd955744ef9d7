"""Masking of credentials and personal data before log output.

Rows from the User table carry passwords (hashed or, for accounts that have
not logged in since the migration, plaintext) and e-mail addresses; neither
may reach a log sink verbatim.
"""

from __future__ import annotations

import re
from typing import Any

MASK = "***MASKED***"

# key=value / "key": "value" pairs whose value is a secret
_SECRET_ASSIGNMENT = re.compile(
    r'(["\']?(?:password|passwd|pwd|secret|token|credential)s?["\']?\s*[:=]\s*)["\']?[^"\'\s,}\]]+["\']?',
    re.IGNORECASE,
)

# Modular crypt hashes ($argon2id$..., $pbkdf2-sha256$...)
_MODULAR_HASH = re.compile(r"\$[a-z0-9-]+\$[^\s;\"']+", re.IGNORECASE)

# iterations:salt:hash written by the old desktop client
_COLON_HASH = re.compile(r"\b\d{3,7}:[A-Za-z0-9+/]{8,}={0,2}:[A-Za-z0-9+/]{16,}={0,2}")

_EMAIL = re.compile(r"([a-zA-Z0-9._%+-]+)@([a-zA-Z0-9.-]+\.[a-zA-Z]{2,})")

SENSITIVE_KEYWORDS: frozenset[str] = frozenset(
    {"password", "passwd", "pwd", "secret", "token", "credential", "hash"}
)


def _mask_email(match: re.Match[str]) -> str:
    local, domain = match.group(1), match.group(2)
    return f"{local[:2]}***@{domain}"


def mask_sensitive_string(text: str) -> str:
    """Return ``text`` with secrets replaced and e-mail local parts shortened."""
    if not text:
        return text

    result = _SECRET_ASSIGNMENT.sub(r"\g<1>" + MASK, text)
    result = _MODULAR_HASH.sub(MASK, result)
    result = _COLON_HASH.sub(MASK, result)
    return _EMAIL.sub(_mask_email, result)


def is_sensitive_key(key: str) -> bool:
    lower_key = key.lower()
    return any(keyword in lower_key for keyword in SENSITIVE_KEYWORDS)


def mask_dict(data: dict[str, Any], depth: int = 0, max_depth: int = 8) -> dict[str, Any]:
    """Recursively mask a structured ``extra_data`` payload."""
    if depth >= max_depth:
        return data

    result: dict[str, Any] = {}
    for key, value in data.items():
        if is_sensitive_key(str(key)):
            result[key] = MASK
        elif isinstance(value, dict):
            result[key] = mask_dict(value, depth + 1, max_depth)
        elif isinstance(value, (list, tuple)):
            result[key] = [
                mask_dict(item, depth + 1, max_depth) if isinstance(item, dict) else item
                for item in value
            ]
        elif isinstance(value, str):
            result[key] = mask_sensitive_string(value)
        else:
            result[key] = value
    return result
