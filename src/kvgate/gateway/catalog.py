"""Command catalog: the static table of tools the gateway exposes.

Each row binds a tool name to its argument schema, the backend call it makes
and how its result is rendered. The dispatcher is driven entirely by this
table, so adding a tool means adding a row here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional, Union

from kvgate.core.exceptions import BackendError, ExpiryNotAppliedError
from kvgate.core.protocols import IKeyValueStore
from kvgate.gateway.rendering import MessageTemplate, RenderContext
from kvgate.models.arguments import SCHEMAS, ToolArguments
from kvgate.models.results import ShapeTag

logger = logging.getLogger(__name__)

Handler = Callable[[IKeyValueStore, Any], Any]
ShapeSelector = Union[ShapeTag, Callable[[Any], ShapeTag]]


@dataclass(frozen=True)
class OperationSpec:
    """One catalog row."""

    name: str
    description: str
    handler: Handler
    shape: ShapeSelector
    message: MessageTemplate = ""
    missing: str = ""
    empty: str = ""

    @property
    def arguments(self) -> type[ToolArguments]:
        return SCHEMAS[self.name]

    def input_schema(self) -> dict[str, Any]:
        """JSON schema advertised to hosts for tool discovery."""
        return self.arguments.model_json_schema(by_alias=True)

    def resolve_shape(self, args: ToolArguments) -> ShapeTag:
        return self.shape(args) if callable(self.shape) else self.shape

    def render_context(self, args: ToolArguments) -> RenderContext:
        return RenderContext(
            fields=args.render_fields(),
            message=self.message,
            missing=self.missing,
            empty=self.empty,
        )


# ---- backend bindings ----

def _set(store: IKeyValueStore, args: Any) -> None:
    # SET ... EX is one atomic command
    store.set(args.key, args.value, expire_seconds=args.expire_seconds or None)


def _get(store: IKeyValueStore, args: Any) -> Optional[str]:
    return store.get(args.key)


def _delete(store: IKeyValueStore, args: Any) -> int:
    removed = store.delete(args.keys)
    logger.debug("DEL removed %d of %d keys", removed, len(args.keys))
    return removed


def _list(store: IKeyValueStore, args: Any) -> list[str]:
    return store.keys(args.pattern)


def _hset(store: IKeyValueStore, args: Any) -> int:
    return store.hset(args.key, args.field, args.value)


def _hget(store: IKeyValueStore, args: Any) -> Optional[str]:
    return store.hget(args.key, args.field)


def _hgetall(store: IKeyValueStore, args: Any) -> dict[str, str]:
    return store.hgetall(args.key)


def _hdel(store: IKeyValueStore, args: Any) -> int:
    return store.hdel(args.key, args.fields)


def _sadd(store: IKeyValueStore, args: Any) -> int:
    return store.sadd(args.key, args.members)


def _srem(store: IKeyValueStore, args: Any) -> int:
    return store.srem(args.key, args.members)


def _smembers(store: IKeyValueStore, args: Any) -> list[str]:
    return store.smembers(args.key)


def _zadd(store: IKeyValueStore, args: Any) -> int:
    return store.zadd(args.key, args.score_mapping())


def _zrange(store: IKeyValueStore, args: Any) -> list[Any]:
    return store.zrange(args.key, args.start, args.stop, withscores=args.with_scores)


def _zrem(store: IKeyValueStore, args: Any) -> int:
    return store.zrem(args.key, args.members)


def _json_set(store: IKeyValueStore, args: Any) -> None:
    store.json_set(args.key, args.value)
    if not args.expire_seconds:
        return
    # Not atomic: the document is already committed when EXPIRE runs.
    try:
        store.expire(args.key, args.expire_seconds)
    except BackendError as exc:
        raise ExpiryNotAppliedError(args.key, str(exc)) from exc


def _json_get(store: IKeyValueStore, args: Any) -> Any:
    return store.json_get(args.key)


def _delete_message(fields: dict[str, Any]) -> str:
    if fields["single"]:
        return f"Successfully deleted key: {fields['key'][0]}"
    return f"Successfully deleted {fields['count']} keys"


def _zrange_shape(args: Any) -> ShapeTag:
    return ShapeTag.SCORED_SEQUENCE if args.with_scores else ShapeTag.SEQUENCE


_OPERATIONS: tuple[OperationSpec, ...] = (
    # Basic operations
    OperationSpec(
        name="set",
        description="Set a Redis key-value pair with optional expiration",
        handler=_set,
        shape=ShapeTag.CONFIRMATION,
        message="Successfully set key: {key}",
    ),
    OperationSpec(
        name="get",
        description="Get value by key from Redis",
        handler=_get,
        shape=ShapeTag.SCALAR,
        missing="Key not found: {key}",
    ),
    OperationSpec(
        name="delete",
        description="Delete one or more keys from Redis",
        handler=_delete,
        shape=ShapeTag.COUNT,
        message=_delete_message,
    ),
    OperationSpec(
        name="list",
        description="List Redis keys matching a pattern",
        handler=_list,
        shape=ShapeTag.SEQUENCE,
        empty="No keys found matching pattern",
    ),
    # Hash operations
    OperationSpec(
        name="hset",
        description="Set a field in a Redis hash",
        handler=_hset,
        shape=ShapeTag.CONFIRMATION,
        message="Successfully set field {field} in hash {key}",
    ),
    OperationSpec(
        name="hget",
        description="Get a field from a Redis hash",
        handler=_hget,
        shape=ShapeTag.SCALAR,
        missing="Field not found: {field}",
    ),
    OperationSpec(
        name="hgetall",
        description="Get all fields and values from a Redis hash",
        handler=_hgetall,
        shape=ShapeTag.MAPPING,
        empty="Hash is empty",
    ),
    OperationSpec(
        name="hdel",
        description="Delete one or more fields from a Redis hash",
        handler=_hdel,
        shape=ShapeTag.COUNT,
        message="Successfully deleted {count} fields from hash {key}",
    ),
    # Set operations
    OperationSpec(
        name="sadd",
        description="Add one or more members to a Redis set",
        handler=_sadd,
        shape=ShapeTag.COUNT,
        message="Successfully added {count} members to set {key}",
    ),
    OperationSpec(
        name="srem",
        description="Remove one or more members from a Redis set",
        handler=_srem,
        shape=ShapeTag.COUNT,
        message="Successfully removed {count} members from set {key}",
    ),
    OperationSpec(
        name="smembers",
        description="Get all members of a Redis set",
        handler=_smembers,
        shape=ShapeTag.SEQUENCE,
        empty="Set is empty",
    ),
    # Sorted set operations
    OperationSpec(
        name="zadd",
        description="Add one or more members to a Redis sorted set",
        handler=_zadd,
        shape=ShapeTag.COUNT,
        message="Successfully added {count} members to sorted set {key}",
    ),
    OperationSpec(
        name="zrange",
        description="Get members from a Redis sorted set by range",
        handler=_zrange,
        shape=_zrange_shape,
        empty="No members found in range",
    ),
    OperationSpec(
        name="zrem",
        description="Remove one or more members from a Redis sorted set",
        handler=_zrem,
        shape=ShapeTag.COUNT,
        message="Successfully removed {count} members from sorted set {key}",
    ),
    # JSON operations
    OperationSpec(
        name="json_set",
        description="Store a JSON value in Redis",
        handler=_json_set,
        shape=ShapeTag.CONFIRMATION,
        message="Successfully set JSON for key: {key}",
    ),
    OperationSpec(
        name="json_get",
        description="Get JSON value by key from Redis",
        handler=_json_get,
        shape=ShapeTag.TREE,
        missing="Key not found: {key}",
    ),
)

CATALOG: dict[str, OperationSpec] = {op.name: op for op in _OPERATIONS}


def iter_operations() -> Iterator[OperationSpec]:
    """All catalog rows in declaration order."""
    return iter(_OPERATIONS)


def lookup(name: str) -> Optional[OperationSpec]:
    return CATALOG.get(name)
