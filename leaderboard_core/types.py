"""Type definitions for raw leaderboard snapshots."""
from __future__ import annotations

from typing import Optional, TypedDict, Union

NumberOrText = Union[int, float, str, None]


class AthletePayload(TypedDict, total=False):
    """
    A competitor record as stored by the data feed.

    All fields are optional (total=False); records missing id, name,
    division or gender are skipped during ingestion. Per-event values use
    flat keys prefixed with the event id.
    """
    id: str
    name: str
    division: str  # 'Rx' | 'Scaled' | 'Foundations'
    gender: str  # 'M' | 'F'
    age: NumberOrText
    gymId: Optional[str]

    # Raw result per event; 0 or missing means no submission.
    # Time events may carry "M:SS" text.
    w1: NumberOrText
    w2: NumberOrText
    w3: NumberOrText

    # Time-capped events: True if the athlete did not finish inside the cap.
    w1_capped: Optional[bool]
    w2_capped: Optional[bool]
    w3_capped: Optional[bool]

    # Tiebreak time in seconds (or "M:SS").
    w1_tiebreaker: NumberOrText
    w2_tiebreaker: NumberOrText
    w3_tiebreaker: NumberOrText

    w1_verified: Optional[bool]
    w2_verified: Optional[bool]
    w3_verified: Optional[bool]


class WorkoutConfigPayload(TypedDict, total=False):
    """Per-event configuration as stored by the admin panel."""
    id: str
    name: str  # e.g., "26.1"
    scoreType: str  # 'reps' | 'time' | 'weight' | 'time_cap_reps'
    unit: Optional[str]
    published: bool
    hasTiebreaker: bool
    timeCap: Optional[int]  # Seconds


class FilterPayload(TypedDict, total=False):
    division: str  # 'all' | division name
    gender: str  # 'all' | 'M' | 'F'
    ageGroup: str  # 'all' | '18-34' | ...
    search: str


WorkoutConfigsPayload = dict[str, WorkoutConfigPayload]
