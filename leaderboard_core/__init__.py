from .filters import AGE_BRACKETS, LeaderboardFilters, apply_filters, in_age_group, sort_leaderboard
from .leaderboard import (
    LeaderboardOutcome,
    build_event_configs,
    build_filters,
    build_roster,
    compute_leaderboard,
    default_event_configs,
)
from .ranking import (
    DEFAULT_EVENT_IDS,
    DIVISIONS,
    Competitor,
    RankedCompetitor,
    aggregate_points,
    compute_rankings,
    division_penalties,
    live_event_ids,
    partition_cohorts,
    rank_event,
)
from .scoring import (
    EventConfig,
    EventResult,
    ScoringMode,
    ScoringStrategy,
    resolve_mode,
    strategy_for,
)
from .time_format import format_duration, format_time_cap, is_valid_duration_text, parse_duration
from .types import AthletePayload, FilterPayload, WorkoutConfigPayload
from .validation import CompetitorRecord, EventConfigRecord, FilterRecord, InputSanitizer

__all__ = [
    "AGE_BRACKETS",
    "DEFAULT_EVENT_IDS",
    "DIVISIONS",
    "AthletePayload",
    "Competitor",
    "CompetitorRecord",
    "EventConfig",
    "EventConfigRecord",
    "EventResult",
    "FilterPayload",
    "FilterRecord",
    "InputSanitizer",
    "LeaderboardFilters",
    "LeaderboardOutcome",
    "RankedCompetitor",
    "ScoringMode",
    "ScoringStrategy",
    "WorkoutConfigPayload",
    "aggregate_points",
    "apply_filters",
    "build_event_configs",
    "build_filters",
    "build_roster",
    "compute_leaderboard",
    "compute_rankings",
    "default_event_configs",
    "division_penalties",
    "format_duration",
    "format_time_cap",
    "in_age_group",
    "is_valid_duration_text",
    "live_event_ids",
    "parse_duration",
    "partition_cohorts",
    "rank_event",
    "resolve_mode",
    "sort_leaderboard",
    "strategy_for",
]
