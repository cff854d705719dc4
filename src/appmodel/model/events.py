"""
Event Payloads
==============
Data classes carried by the signals of the model layer.

Classes:
    ChangeEvent: One attribute write, as seen by change subscribers.
    AttributeChange: History record of one applied write.
    ModelChangeEvent: Payload of `Model.change` (one per coalesced batch).
    ErrorEvent: Payload of `Model.error`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Dict, Optional


class ErrorType(StrEnum):
    PARSE = "parse"
    VALIDATE = "validate"


class SyncAction(StrEnum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    GET = "get"


@dataclass
class ChangeEvent:
    """
    A single attribute write in flight.

    Subscribers registered with `subscribe_to_change` receive this object before
    the value is stored and may cancel the write:

    - `stop()` cancels the write and skips the remaining subscribers.
    - `prevent()` cancels the write; remaining subscribers still run.

    The container returns the same object from `set_attr`, so it doubles as the
    outcome of the write.
    """
    attr_name: str
    new_val: Any
    prev_val: Any
    src: Optional[str] = None
    options: Dict[str, Any] = field(default_factory=dict)
    stopped: bool = False
    prevented: bool = False

    def stop(self) -> None:
        self.stopped = True

    def prevent(self) -> None:
        self.prevented = True

    @property
    def cancelled(self) -> bool:
        return self.stopped or self.prevented


@dataclass(frozen=True)
class AttributeChange:
    new_val: Any
    prev_val: Any
    src: Optional[str] = None


@dataclass(frozen=True)
class ModelChangeEvent:
    """Attribute name -> AttributeChange for every write of one batch."""
    changed: Dict[str, AttributeChange]


@dataclass(frozen=True)
class ErrorEvent:
    type: ErrorType
    error: Any = None
    attributes: Optional[Dict[str, Any]] = None
