"""Explicit success/failure result returned across the processor boundary."""

from dataclasses import dataclass
from typing import Any, Dict, Union


@dataclass(frozen=True)
class Ok:
    """Processing succeeded with a JSON-serializable payload."""

    data: Dict[str, Any]


@dataclass(frozen=True)
class Err:
    """Processing failed; ``reason`` is surfaced to the caller verbatim."""

    reason: str


Result = Union[Ok, Err]
