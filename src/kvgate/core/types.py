"""Type aliases used across kvgate."""

from __future__ import annotations

from typing import Any, Union

JsonValue = Any
ScorePair = tuple[str, float]
# Redis may answer WITHSCORES as pairs or as a flat [member, score, ...] list.
ScoredReply = Union[list[ScorePair], list[str]]
