"""Tool argument models: one pydantic schema per gateway operation.

Validation is pure: ``validate`` either returns a normalized model or raises
``InvalidArgumentsError`` listing every violated field. The backend is never
consulted.
"""

from __future__ import annotations

import math
from typing import Annotated, Any, ClassVar, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PrivateAttr,
    StrictBool,
    StrictStr,
    ValidationError,
    WithJsonSchema,
    model_validator,
)

from kvgate.core.exceptions import FieldError, InvalidArgumentsError


def _whole_number(value: Any) -> Any:
    """Accept ints and integral floats (``2.0`` -> ``2``); reject bools and NaN/inf."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("Input should be a number")
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError("Input should be a finite number")
        if not value.is_integer():
            raise ValueError("Input should be a whole number")
        return int(value)
    return value


WholeNumber = Annotated[int, BeforeValidator(_whole_number)]
Score = Annotated[float, Field(strict=True, allow_inf_nan=False)]


class ToolArguments(BaseModel):
    """Base for all argument models.

    ``counted`` names the list field whose length is reported in COUNT
    messages.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    counted: ClassVar[Optional[str]] = None

    @property
    def count(self) -> int:
        if self.counted is None:
            return 0
        return len(getattr(self, self.counted))

    def render_fields(self) -> dict[str, Any]:
        """Request values available to message templates."""
        fields = self.model_dump()
        fields["count"] = self.count
        return fields


# ---------------------------------------------------------------------------
# Strings / keyspace
# ---------------------------------------------------------------------------

class SetArguments(ToolArguments):
    key: StrictStr = Field(description="Redis key")
    value: StrictStr = Field(description="Value to store")
    expire_seconds: Optional[WholeNumber] = Field(
        default=None, alias="expireSeconds",
        description="Optional expiration time in seconds",
    )


class GetArguments(ToolArguments):
    key: StrictStr = Field(description="Redis key to retrieve")


class DeleteArguments(ToolArguments):
    """A single key or a list of keys, always held as a list."""

    key: Annotated[
        list[StrictStr],
        WithJsonSchema({
            "anyOf": [
                {"type": "string"},
                {"type": "array", "items": {"type": "string"}},
            ],
        }),
    ] = Field(description="Key or array of keys to delete")

    counted: ClassVar[Optional[str]] = "key"
    _single: bool = PrivateAttr(default=False)

    @model_validator(mode="wrap")
    @classmethod
    def _remember_cardinality(cls, data: Any, handler: Any) -> "DeleteArguments":
        single = isinstance(data, dict) and isinstance(data.get("key"), str)
        if single:
            data = {**data, "key": [data["key"]]}
        model = handler(data)
        model._single = single
        return model

    @property
    def keys(self) -> list[str]:
        return list(self.key)

    @property
    def single(self) -> bool:
        """True when the caller sent one key as a plain string."""
        return self._single

    def render_fields(self) -> dict[str, Any]:
        fields = super().render_fields()
        fields["single"] = self.single
        return fields


class ListArguments(ToolArguments):
    pattern: StrictStr = Field(default="*", description="Pattern to match keys (default: *)")


# ---------------------------------------------------------------------------
# Hashes
# ---------------------------------------------------------------------------

class HashSetArguments(ToolArguments):
    key: StrictStr = Field(description="Hash key")
    field: StrictStr = Field(description="Field name")
    value: StrictStr = Field(description="Field value")


class HashGetArguments(ToolArguments):
    key: StrictStr = Field(description="Hash key")
    field: StrictStr = Field(description="Field name")


class HashGetAllArguments(ToolArguments):
    key: StrictStr = Field(description="Hash key")


class HashDeleteArguments(ToolArguments):
    key: StrictStr = Field(description="Hash key")
    fields: list[StrictStr] = Field(description="Fields to delete")

    counted: ClassVar[Optional[str]] = "fields"


# ---------------------------------------------------------------------------
# Sets
# ---------------------------------------------------------------------------

class SetAddArguments(ToolArguments):
    key: StrictStr = Field(description="Set key")
    members: list[StrictStr] = Field(description="Members to add")

    counted: ClassVar[Optional[str]] = "members"


class SetRemoveArguments(ToolArguments):
    key: StrictStr = Field(description="Set key")
    members: list[StrictStr] = Field(description="Members to remove")

    counted: ClassVar[Optional[str]] = "members"


class SetMembersArguments(ToolArguments):
    key: StrictStr = Field(description="Set key")


# ---------------------------------------------------------------------------
# Sorted sets
# ---------------------------------------------------------------------------

class ScoredMember(BaseModel):
    score: Score = Field(description="Member score")
    member: StrictStr = Field(description="Member value")


class SortedSetAddArguments(ToolArguments):
    key: StrictStr = Field(description="Sorted set key")
    members: list[ScoredMember] = Field(description="Members to add with their scores")

    counted: ClassVar[Optional[str]] = "members"

    def score_mapping(self) -> dict[str, float]:
        """Members as the ``{member: score}`` mapping ZADD expects; last score wins."""
        return {m.member: m.score for m in self.members}


class SortedSetRangeArguments(ToolArguments):
    key: StrictStr = Field(description="Sorted set key")
    start: WholeNumber = Field(description="Start index")
    stop: WholeNumber = Field(description="Stop index")
    with_scores: StrictBool = Field(
        default=False, alias="withScores", description="Include scores in output",
    )


class SortedSetRemoveArguments(ToolArguments):
    key: StrictStr = Field(description="Sorted set key")
    members: list[StrictStr] = Field(description="Members to remove")

    counted: ClassVar[Optional[str]] = "members"


# ---------------------------------------------------------------------------
# JSON documents
# ---------------------------------------------------------------------------

class JsonSetArguments(ToolArguments):
    key: StrictStr = Field(description="Redis key")
    value: Any = Field(description="JSON value to store")
    expire_seconds: Optional[WholeNumber] = Field(
        default=None, alias="expireSeconds",
        description="Optional expiration time in seconds",
    )


class JsonGetArguments(ToolArguments):
    key: StrictStr = Field(description="Redis key to retrieve")


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

SCHEMAS: dict[str, type[ToolArguments]] = {
    "set": SetArguments,
    "get": GetArguments,
    "delete": DeleteArguments,
    "list": ListArguments,
    "hset": HashSetArguments,
    "hget": HashGetArguments,
    "hgetall": HashGetAllArguments,
    "hdel": HashDeleteArguments,
    "sadd": SetAddArguments,
    "srem": SetRemoveArguments,
    "smembers": SetMembersArguments,
    "zadd": SortedSetAddArguments,
    "zrange": SortedSetRangeArguments,
    "zrem": SortedSetRemoveArguments,
    "json_set": JsonSetArguments,
    "json_get": JsonGetArguments,
}


def field_errors(exc: ValidationError) -> list[FieldError]:
    """Flatten a pydantic error into one FieldError per violated field, in order."""
    seen: set[str] = set()
    errors: list[FieldError] = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"])
        if field in seen:
            continue
        seen.add(field)
        errors.append(FieldError(field=field, reason=err["msg"]))
    return errors


def validate_arguments(model: type[ToolArguments], raw: Any) -> ToolArguments:
    """Validate a raw payload against ``model``.

    Raises:
        InvalidArgumentsError: one entry per violated field.
    """
    try:
        return model.model_validate({} if raw is None else raw)
    except ValidationError as exc:
        raise InvalidArgumentsError(field_errors(exc)) from exc


def validate(operation: str, raw: Any) -> ToolArguments:
    """Validate ``raw`` against the schema registered for ``operation``.

    Raises:
        KeyError: no schema is registered under ``operation``.
        InvalidArgumentsError: the payload does not match the schema.
    """
    return validate_arguments(SCHEMAS[operation], raw)
