"""kvgate exception hierarchy."""

from __future__ import annotations

from dataclasses import dataclass


class KVGateError(Exception):
    """Base exception for all kvgate errors."""


class UnknownOperationError(KVGateError):
    """Requested tool name is not in the command catalog."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")


@dataclass(frozen=True)
class FieldError:
    """One violated field reported by argument validation."""

    field: str
    reason: str

    def __str__(self) -> str:
        return f"{self.field}: {self.reason}" if self.field else self.reason


class InvalidArgumentsError(KVGateError):
    """Tool arguments failed schema validation."""

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = errors
        super().__init__("Invalid arguments: " + ", ".join(str(e) for e in errors))

    @property
    def fields(self) -> list[str]:
        return [e.field for e in self.errors]


class BackendError(KVGateError):
    """A backend command failed after the connection was established."""


class ExpiryNotAppliedError(BackendError):
    """Value was stored but the follow-up EXPIRE failed."""

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        super().__init__(
            f"JSON stored for key {key} but expiry was not applied: {reason}"
        )


class BackendUnavailableError(KVGateError):
    """Initial backend connection exhausted its retry budget."""

    def __init__(self, url: str, attempts: int, reason: str) -> None:
        self.url = url
        self.attempts = attempts
        super().__init__(f"Could not connect to {url} after {attempts} attempts: {reason}")


class ToolCallError(KVGateError):
    """Raised by the MCP facade to report a failed invocation to the host."""
