"""Explicit outcome of a single-row lookup.

``get_by_id`` style methods fold every outcome into ``None``. Callers that
must know *why* nothing came back use ``lookup`` instead, which returns one
of:

    Found(value)    the row exists
    NotFound(key)   the query ran and matched nothing
    Failed(cause)   the query could not run (cause is the driver error)
"""

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Found(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    def value_or_none(self) -> Optional[T]:
        return self.value


@dataclass(frozen=True)
class NotFound:
    key: Any = None

    @property
    def ok(self) -> bool:
        return False

    def value_or_none(self) -> None:
        return None


@dataclass(frozen=True)
class Failed:
    cause: BaseException

    @property
    def ok(self) -> bool:
        return False

    def value_or_none(self) -> None:
        return None


Lookup = Union[Found[T], NotFound, Failed]
