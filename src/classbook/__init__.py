"""Classbook: persistence and validation layer for school records."""

from .config import Settings, get_settings
from .errors import (
    ClassbookError,
    InvalidCredentialsError,
    NotFoundError,
    PersistenceError,
    UnknownAccountError,
    ValidationError,
    WrongPasswordError,
)
from .store import SchoolStore

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "get_settings",
    "SchoolStore",
    "ClassbookError",
    "ValidationError",
    "PersistenceError",
    "NotFoundError",
    "InvalidCredentialsError",
    "UnknownAccountError",
    "WrongPasswordError",
]
