"""Table-driven dispatcher from tool calls to backend commands."""

from __future__ import annotations

import logging
from typing import Any, Optional

from kvgate.core.exceptions import BackendError, InvalidArgumentsError, UnknownOperationError
from kvgate.core.protocols import IKeyValueStore
from kvgate.gateway.catalog import CATALOG, OperationSpec
from kvgate.gateway.rendering import render
from kvgate.models.arguments import validate_arguments
from kvgate.models.results import ErrorKind, InvocationResult

logger = logging.getLogger(__name__)


class Dispatcher:
    """Validates, executes and renders one tool call at a time.

    Calls are synchronous and never raise: every failure comes back as an
    ``InvocationResult`` with an ``ErrorKind``. Backend failures are not
    retried here; reconnection belongs to the store's client.
    """

    def __init__(
        self,
        store: IKeyValueStore,
        catalog: Optional[dict[str, OperationSpec]] = None,
    ) -> None:
        self._store = store
        self._catalog = CATALOG if catalog is None else catalog

    @property
    def operations(self) -> list[OperationSpec]:
        return list(self._catalog.values())

    def handle(self, name: str, raw_arguments: Any = None) -> InvocationResult:
        try:
            return InvocationResult.success(self._execute(name, raw_arguments))
        except UnknownOperationError as exc:
            logger.info("Rejected unknown tool %r", name)
            return InvocationResult.failure(ErrorKind.UNKNOWN_OPERATION, str(exc))
        except InvalidArgumentsError as exc:
            logger.info("Rejected %s call: %s", name, exc)
            return InvocationResult.failure(ErrorKind.INVALID_ARGUMENTS, str(exc))
        except BackendError as exc:
            logger.warning("Backend failure in %s: %s", name, exc)
            return InvocationResult.failure(ErrorKind.BACKEND_ERROR, str(exc))
        except Exception as exc:
            logger.exception("Tool %r failed", name)
            return InvocationResult.failure(
                ErrorKind.INTERNAL_ERROR, f"Internal error: {type(exc).__name__}: {exc}",
            )

    def _execute(self, name: str, raw_arguments: Any) -> str:
        spec = self._catalog.get(name)
        if spec is None:
            raise UnknownOperationError(name)

        args = validate_arguments(spec.arguments, raw_arguments)
        logger.debug("Dispatching %s", name)
        result = spec.handler(self._store, args)
        return render(spec.resolve_shape(args), result, spec.render_context(args))
