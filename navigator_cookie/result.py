"""Tagged results for the untrusted-input path.

Every stage that inspects a client supplied token (split, base64 decode,
MAC check, decrypt, unpad, deserialize) returns ``Ok`` or ``Err`` instead
of raising.
"""
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Ok:
    """Successful result carrying ``value``."""
    value: Any

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failed result carrying the (never raised) ``error``."""
    error: Exception

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok, Err]
