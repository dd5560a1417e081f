"""Event classifier: scoring mode -> ordering strategy.

Each event is scored under exactly one mode. The mode is resolved to a
``ScoringStrategy`` once per event; the ranker then sorts with the strategy's
key instead of branching on the mode for every comparison.

Modes:
- higher_is_better: larger raw result first (reps, weight).
- lower_is_better: smaller raw result first (time).
- capped_completion: finishers by time, then non-finishers by partial reps.

In every mode a raw result of 0 means "no submission" and sorts last.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Literal

ScoringMode = Literal["higher_is_better", "lower_is_better", "capped_completion"]

SCORING_MODES: tuple[ScoringMode, ...] = (
    "higher_is_better",
    "lower_is_better",
    "capped_completion",
)

# Score type names used by stored workout configs.
SCORE_TYPE_ALIASES: dict[str, ScoringMode] = {
    "reps": "higher_is_better",
    "weight": "higher_is_better",
    "time": "lower_is_better",
    "time_cap_reps": "capped_completion",
}


@dataclass(frozen=True)
class EventResult:
    raw: float = 0.0
    # True when the competitor hit the time cap; raw is then partial reps.
    capped: bool = False
    tiebreak_seconds: float | None = None
    verified: bool = False

    @property
    def has_result(self) -> bool:
        return self.raw != 0


NO_RESULT = EventResult()


@dataclass(frozen=True)
class EventConfig:
    id: str
    mode: ScoringMode = "higher_is_better"
    published: bool = False
    has_tiebreaker: bool = False
    time_cap: int | None = None
    name: str = ""
    unit: str | None = None


SortKey = tuple[float, ...]


@dataclass(frozen=True)
class ScoringStrategy:
    """Ordering rule for one event. Smaller keys rank first."""

    mode: ScoringMode
    key_fn: Callable[[EventResult], SortKey]

    def sort_key(self, result: EventResult) -> SortKey:
        return self.key_fn(result)

    def compare(self, a: EventResult, b: EventResult) -> int:
        """Return -1 if ``a`` ranks ahead of ``b``, 1 if behind, 0 if tied."""
        ka, kb = self.key_fn(a), self.key_fn(b)
        if ka < kb:
            return -1
        if ka > kb:
            return 1
        return 0


def resolve_mode(value: str | None) -> ScoringMode | None:
    """Map a mode or stored score type name to a scoring mode, else None."""
    if not isinstance(value, str):
        return None
    candidate = value.strip().lower()
    if candidate in SCORING_MODES:
        return candidate  # type: ignore[return-value]
    return SCORE_TYPE_ALIASES.get(candidate)


def _tiebreak_key(result: EventResult) -> float:
    # A recorded tiebreak always beats a missing one.
    tb = result.tiebreak_seconds
    if tb is None or not math.isfinite(float(tb)) or tb <= 0:
        return math.inf
    return float(tb)


def _higher_is_better(use_tiebreak: bool) -> Callable[[EventResult], SortKey]:
    def key(result: EventResult) -> SortKey:
        if not result.has_result:
            return (1, 0.0, 0.0)
        return (0, -float(result.raw), _tiebreak_key(result) if use_tiebreak else 0.0)

    return key


def _lower_is_better(use_tiebreak: bool) -> Callable[[EventResult], SortKey]:
    def key(result: EventResult) -> SortKey:
        if not result.has_result:
            return (1, 0.0, 0.0)
        return (0, float(result.raw), _tiebreak_key(result) if use_tiebreak else 0.0)

    return key


def _capped_completion(result: EventResult) -> SortKey:
    if not result.has_result:
        return (1, 0, 0.0, 0.0)
    if not result.capped:
        return (0, 0, float(result.raw), 0.0)
    return (0, 1, -float(result.raw), _tiebreak_key(result))


def strategy_for(config: EventConfig) -> ScoringStrategy:
    """Build the ordering strategy for an event configuration."""
    if config.mode == "lower_is_better":
        return ScoringStrategy(mode=config.mode, key_fn=_lower_is_better(config.has_tiebreaker))
    if config.mode == "capped_completion":
        return ScoringStrategy(mode=config.mode, key_fn=_capped_completion)
    return ScoringStrategy(mode="higher_is_better", key_fn=_higher_is_better(config.has_tiebreaker))
