"""
Operation Results

Service operations return ``Ok(value)`` or ``Err(kind, message)`` instead of
raising, so callers branch on the outcome:

    result = await catalog.lookup_product(product_id)
    if isinstance(result, Err):
        ...
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Failure taxonomy"""
    INVALID_INPUT = "InvalidInput"  # missing or empty required field
    NOT_FOUND = "NotFound"
    UNAUTHORIZED = "Unauthorized"
    DUPLICATE_ID = "DuplicateId"
    STORAGE_FAILURE = "StorageFailure"  # backend rejected a write


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful result"""
    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failed result with a human-readable reason"""
    kind: ErrorKind
    message: str

    @property
    def is_ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]
