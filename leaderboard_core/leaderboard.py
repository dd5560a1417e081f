"""Leaderboard snapshot ingestion (pure, no database/transport).

This module turns a raw snapshot, as delivered by the data feed, into the
ranking engine's typed records and returns the ranked leaderboard.

Architecture:
- Athletes and workout configs are plain dicts (see ``types.py``)
- Records are validated with pydantic models from ``validation.py``
- compute_leaderboard() takes (athletes, configs, filters) and returns a
  LeaderboardOutcome with the ranked rows
- The caller re-invokes it on every snapshot change and discards the old result

Failure policy:
- An athlete record that fails validation is skipped and reported by id
- A workout config that is missing or fails validation counts as unpublished
- Malformed result values inside a valid record become 0 (no result)
- Nothing here raises for bad data
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from pydantic import ValidationError

from .filters import LeaderboardFilters
from .ranking import (
    DEFAULT_EVENT_IDS,
    Competitor,
    RankedCompetitor,
    compute_rankings,
    live_event_ids,
)
from .scoring import EventConfig
from .validation import CompetitorRecord, EventConfigRecord, FilterRecord

logger = logging.getLogger(__name__)


@dataclass
class LeaderboardOutcome:
    """Result of ranking one snapshot."""

    rows: List[RankedCompetitor]
    live_event_ids: Tuple[str, ...]
    skipped_athlete_ids: List[str]
    disabled_event_ids: List[str]


def default_event_configs(event_ids: Sequence[str] = DEFAULT_EVENT_IDS) -> Dict[str, Dict[str, Any]]:
    """Default workout configs used when the feed has none yet.

    Returns:
        Dict keyed by event id; each config is reps-scored and unpublished,
        named after the Open numbering ("26.1", "26.2", ...).
    """
    return {
        event_id: {
            "id": event_id,
            "name": f"26.{index}",
            "scoreType": "reps",
            "unit": "reps",
            "published": False,
        }
        for index, event_id in enumerate(event_ids, start=1)
    }


def build_roster(
    athletes: Sequence[Any] | None,
    event_ids: Sequence[str] = DEFAULT_EVENT_IDS,
) -> Tuple[List[Competitor], List[str]]:
    """Validate raw athlete dicts.

    Returns:
        (competitors, skipped) where skipped lists the id (or position) of
        every record that could not be used.
    """
    roster: List[Competitor] = []
    skipped: List[str] = []
    for pos, raw in enumerate(athletes or []):
        if not isinstance(raw, dict):
            skipped.append(f"#{pos}")
            continue
        try:
            record = CompetitorRecord.model_validate(raw)
        except ValidationError as e:
            label = str(raw.get("id") or f"#{pos}")
            logger.warning(f"Skipping athlete {label}: {e.error_count()} invalid field(s)")
            skipped.append(label)
            continue
        roster.append(record.to_competitor(event_ids))
    return roster, skipped


def build_event_configs(
    configs: Mapping[str, Any] | None,
    event_ids: Sequence[str] = DEFAULT_EVENT_IDS,
) -> Tuple[Dict[str, EventConfig], List[str]]:
    """Validate raw workout configs for the contest's events.

    Returns:
        (configs, disabled) where disabled lists event ids whose config was
        missing or invalid; those events are left out of the mapping.
    """
    resolved: Dict[str, EventConfig] = {}
    disabled: List[str] = []
    source = configs or {}
    for event_id in event_ids:
        raw = source.get(event_id)
        if not isinstance(raw, dict):
            disabled.append(event_id)
            continue
        try:
            record = EventConfigRecord.model_validate({**raw, "id": event_id})
        except ValidationError as e:
            logger.warning(f"Workout {event_id} config invalid, treating as unpublished: {e.error_count()} error(s)")
            disabled.append(event_id)
            continue
        resolved[event_id] = record.to_event_config()
    return resolved, disabled


def build_filters(filters: Mapping[str, Any] | LeaderboardFilters | None) -> LeaderboardFilters:
    if isinstance(filters, LeaderboardFilters):
        return filters
    if not filters:
        return LeaderboardFilters()
    try:
        return FilterRecord.model_validate(dict(filters)).to_filters()
    except ValidationError as e:
        logger.warning(f"Ignoring invalid leaderboard filters: {e.error_count()} error(s)")
        return LeaderboardFilters()


def compute_leaderboard(
    athletes: Sequence[Any] | None,
    workout_configs: Mapping[str, Any] | None,
    filters: Mapping[str, Any] | LeaderboardFilters | None = None,
    *,
    event_ids: Sequence[str] = DEFAULT_EVENT_IDS,
    by_sex: bool = False,
) -> LeaderboardOutcome:
    """Rank a raw leaderboard snapshot.

    Args:
        athletes: Raw athlete dicts (not mutated)
        workout_configs: Raw configs keyed by event id (not mutated)
        filters: Display filters as a dict ({division, gender, ageGroup, search})
            or LeaderboardFilters; None shows everyone
        event_ids: Events of the contest
        by_sex: Rank each sex on its own ladder

    Returns:
        LeaderboardOutcome with rows in display order plus ingestion report
    """
    roster, skipped = build_roster(athletes, event_ids)
    configs, disabled = build_event_configs(workout_configs, event_ids)
    rows = compute_rankings(
        roster,
        configs,
        build_filters(filters),
        event_ids=event_ids,
        by_sex=by_sex,
    )
    live = live_event_ids(roster, configs, event_ids)
    return LeaderboardOutcome(
        rows=rows,
        live_event_ids=live,
        skipped_athlete_ids=skipped,
        disabled_event_ids=disabled,
    )
