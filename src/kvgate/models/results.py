"""Invocation outcome and result-shape models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ShapeTag(str, Enum):
    """Selects the rendering rule applied to a backend result."""

    CONFIRMATION = "confirmation"
    SCALAR = "scalar"
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    SCORED_SEQUENCE = "scored_sequence"
    TREE = "tree"
    COUNT = "count"


class ErrorKind(str, Enum):
    UNKNOWN_OPERATION = "unknown_operation"
    INVALID_ARGUMENTS = "invalid_arguments"
    BACKEND_ERROR = "backend_error"
    INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True)
class InvocationResult:
    """Outcome of one dispatched tool call: rendered text or a typed failure."""

    text: str
    error: Optional[ErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, text: str) -> "InvocationResult":
        return cls(text=text)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "InvocationResult":
        return cls(text=message, error=kind)
