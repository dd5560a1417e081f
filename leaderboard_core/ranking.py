"""Leaderboard ranking engine (per-event placements + golf-style totals).

Single source of truth for the overall leaderboard:
- Cohorts: one ranking ladder per event, divisions stacked Rx > Scaled > Foundations.
- Placements: standard competition ranking (1, 1, 3) inside each division,
  offset by the number of competitors in more advanced divisions.
- Points: sum of placements over live events; a missing result costs
  division size + 1, carrying the same division offset. Fewer points is better.

The engine is pure: inputs are never mutated and nothing is kept between calls.
"""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Literal, Mapping, Sequence

from .filters import LeaderboardFilters, apply_filters, sort_leaderboard
from .scoring import NO_RESULT, EventConfig, EventResult, ScoringStrategy, strategy_for

logger = logging.getLogger(__name__)

Division = Literal["Rx", "Scaled", "Foundations"]
Sex = Literal["M", "F"]

# Most to least advanced.
DIVISIONS: tuple[Division, ...] = ("Rx", "Scaled", "Foundations")
SEXES: tuple[Sex, ...] = ("M", "F")
DEFAULT_EVENT_IDS: tuple[str, ...] = ("w1", "w2", "w3")

# Roster positions grouped per division, in precedence order.
Ladder = list[list[int]]


@dataclass(frozen=True)
class Competitor:
    id: str
    name: str
    division: str
    sex: str
    age: int | None = None
    results: Mapping[str, EventResult] = field(default_factory=dict)
    gym_id: str | None = None

    def result(self, event_id: str) -> EventResult:
        return self.results.get(event_id, NO_RESULT)


@dataclass(frozen=True)
class RankedCompetitor:
    competitor: Competitor
    placements: Mapping[str, int | None]
    total_points: int
    participation: int

    @property
    def id(self) -> str:
        return self.competitor.id

    @property
    def name(self) -> str:
        return self.competitor.name

    @property
    def division(self) -> str:
        return self.competitor.division

    @property
    def sex(self) -> str:
        return self.competitor.sex

    @property
    def age(self) -> int | None:
        return self.competitor.age

    def placement(self, event_id: str) -> int | None:
        return self.placements.get(event_id)


def partition_cohorts(roster: Sequence[Competitor], *, by_sex: bool = False) -> list[Ladder]:
    """
    Split the roster into ranking ladders.

    Args:
      roster: competitors; ladders refer to them by position.
      by_sex: rank each sex on its own ladder instead of pooling them.

    Returns:
      One ladder (or one per sex). Each ladder holds one group of roster
      positions per division, most advanced first. Competitors whose division
      is unknown are left out.
    """
    sexes: tuple[str | None, ...] = SEXES if by_sex else (None,)
    ladders: list[Ladder] = []
    for sex in sexes:
        ladder: Ladder = []
        for division in DIVISIONS:
            ladder.append(
                [
                    pos
                    for pos, comp in enumerate(roster)
                    if comp.division == division and (sex is None or comp.sex == sex)
                ]
            )
        ladders.append(ladder)
    return ladders


def rank_event(
    roster: Sequence[Competitor],
    ladders: Sequence[Ladder],
    event_id: str,
    strategy: ScoringStrategy,
) -> list[int | None]:
    """Assign placements for one event, indexed by roster position."""
    placements: list[int | None] = [None] * len(roster)
    for ladder in ladders:
        offset = 0
        for group in ladder:
            ordered = sorted(group, key=lambda pos: strategy.sort_key(roster[pos].result(event_id)))
            prev_key = None
            prev_place = 0
            for place, pos in enumerate(ordered, start=1):
                key = strategy.sort_key(roster[pos].result(event_id))
                if place > 1 and key == prev_key:
                    place = prev_place
                placements[pos] = place + offset
                prev_key, prev_place = key, place
            offset += len(group)
    return placements


def live_event_ids(
    roster: Sequence[Competitor],
    configs: Mapping[str, EventConfig],
    event_ids: Sequence[str] = DEFAULT_EVENT_IDS,
) -> tuple[str, ...]:
    """Events that are published and have at least one submitted result."""
    live: list[str] = []
    for event_id in event_ids:
        config = configs.get(event_id)
        if config is None or not config.published:
            continue
        if any(comp.result(event_id).has_result for comp in roster):
            live.append(event_id)
    return tuple(live)


def division_penalties(roster: Sequence[Competitor]) -> dict[str, int]:
    """
    Missing-result penalty per division.

    The penalty is division size + 1, shifted by the same offset rank_event
    gives the division's placements, so it always lands just below the
    division's own last place.
    """
    sizes = Counter(comp.division for comp in roster)
    penalties: dict[str, int] = {}
    offset = 0
    for division in DIVISIONS:
        if sizes[division]:
            penalties[division] = offset + sizes[division] + 1
        offset += sizes[division]
    # Unknown divisions are never placed, so there is nothing to offset.
    for division, size in sizes.items():
        penalties.setdefault(division, size + 1)
    return penalties


def aggregate_points(
    roster: Sequence[Competitor],
    placements_by_event: Mapping[str, Sequence[int | None]],
    live_ids: Sequence[str],
) -> list[RankedCompetitor]:
    """Total placements over live events; placements already carry the division offset."""
    penalties = division_penalties(roster)
    ranked: list[RankedCompetitor] = []
    for pos, comp in enumerate(roster):
        penalty = penalties[comp.division]
        total = 0
        participation = 0
        for event_id in live_ids:
            if comp.result(event_id).has_result:
                placement = placements_by_event[event_id][pos]
                total += placement if placement is not None else penalty
                participation += 1
            else:
                total += penalty
        ranked.append(
            RankedCompetitor(
                competitor=comp,
                placements={event_id: places[pos] for event_id, places in placements_by_event.items()},
                total_points=total,
                participation=participation,
            )
        )
    return ranked


def compute_rankings(
    competitors: Sequence[Competitor],
    configs: Mapping[str, EventConfig],
    filters: LeaderboardFilters | None = None,
    *,
    event_ids: Sequence[str] = DEFAULT_EVENT_IDS,
    by_sex: bool = False,
) -> list[RankedCompetitor]:
    """
    Compute the leaderboard in display order.

    Args:
      competitors: roster snapshot (order irrelevant, never mutated).
      configs: event_id -> EventConfig; a missing entry counts as unpublished.
      filters: display filters applied after ranking; None shows everyone.
      event_ids: events of the contest.
      by_sex: rank sexes on separate ladders (default pools them per division).
    """
    roster = list(competitors)
    ladders = partition_cohorts(roster, by_sex=by_sex)
    placements_by_event: dict[str, list[int | None]] = {}
    for event_id in event_ids:
        strategy = strategy_for(configs.get(event_id) or EventConfig(id=event_id))
        placements_by_event[event_id] = rank_event(roster, ladders, event_id, strategy)

    live_ids = live_event_ids(roster, configs, event_ids)
    logger.debug(f"Ranking {len(roster)} competitors; live events: {list(live_ids)}")
    ranked = aggregate_points(roster, placements_by_event, live_ids)
    return sort_leaderboard(apply_filters(ranked, filters or LeaderboardFilters()))
