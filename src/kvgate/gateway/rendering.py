"""Render backend results as the text returned to tool callers."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Union

from kvgate.models.results import ShapeTag

MessageTemplate = Union[str, Callable[[dict[str, Any]], str]]


@dataclass(frozen=True)
class RenderContext:
    """Request values plus the catalog templates for one operation."""

    fields: dict[str, Any] = field(default_factory=dict)
    message: MessageTemplate = ""
    missing: str = ""
    empty: str = ""

    def format(self, template: MessageTemplate) -> str:
        if callable(template):
            return template(self.fields)
        return template.format(**self.fields)


def format_score(score: Any) -> str:
    """Render a score as Redis prints it (``%.17g``): ``1.0`` -> ``1``, strings verbatim."""
    if isinstance(score, float):
        return f"{score:.17g}"
    return str(score)


def pair_scores(reply: Iterable[Any]) -> list[tuple[str, Any]]:
    """Normalize a WITHSCORES reply into ``(member, score)`` pairs.

    Clients return either real pairs or a flat ``[member, score, ...]`` list;
    the flat form is paired positionally (element 2i with 2i+1).
    """
    items = list(reply)
    if items and all(isinstance(i, (tuple, list)) and len(i) == 2 for i in items):
        return [(member, score) for member, score in items]
    return list(zip(items[0::2], items[1::2]))


def _render_message(result: Any, context: RenderContext) -> str:
    return context.format(context.message)


def _render_scalar(result: Any, context: RenderContext) -> str:
    if result is None:
        return context.format(context.missing)
    return result


def _render_mapping(result: Any, context: RenderContext) -> str:
    if not result:
        return context.format(context.empty)
    return "\n".join(f"{k}: {v}" for k, v in result.items())


def _render_sequence(result: Any, context: RenderContext) -> str:
    items = list(result or [])
    if not items:
        return context.format(context.empty)
    return "\n".join(str(item) for item in items)


def _render_scored_sequence(result: Any, context: RenderContext) -> str:
    pairs = pair_scores(result or [])
    if not pairs:
        return context.format(context.empty)
    return "\n".join(f"{member} (score: {format_score(score)})" for member, score in pairs)


def _render_tree(result: Any, context: RenderContext) -> str:
    if result is None:
        return context.format(context.missing)
    return json.dumps(result, indent=2, ensure_ascii=False)


_RENDERERS: dict[ShapeTag, Callable[[Any, RenderContext], str]] = {
    ShapeTag.CONFIRMATION: _render_message,
    ShapeTag.COUNT: _render_message,
    ShapeTag.SCALAR: _render_scalar,
    ShapeTag.MAPPING: _render_mapping,
    ShapeTag.SEQUENCE: _render_sequence,
    ShapeTag.SCORED_SEQUENCE: _render_scored_sequence,
    ShapeTag.TREE: _render_tree,
}


def render(shape: ShapeTag, result: Any, context: RenderContext) -> str:
    """Convert a backend result into a single text block using ``shape``'s rule."""
    return _RENDERERS[shape](result, context)
