"""Display filters and final leaderboard ordering."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable

if TYPE_CHECKING:
    from .ranking import RankedCompetitor

ALL = "all"

# Inclusive bounds; None means open-ended.
AGE_BRACKETS: dict[str, tuple[int, int | None]] = {
    "14-17": (14, 17),
    "18-34": (18, 34),
    "35-39": (35, 39),
    "40-44": (40, 44),
    "45-49": (45, 49),
    "50-54": (50, 54),
    "55+": (55, None),
}


@dataclass(frozen=True)
class LeaderboardFilters:
    division: str | None = ALL
    sex: str | None = ALL
    age_group: str | None = ALL
    search: str | None = ""


def _is_unset(value: str | None) -> bool:
    return value is None or value == "" or value == ALL


def _coerce_age(age: Any) -> int | None:
    if age is None or isinstance(age, bool):
        return None
    if isinstance(age, int):
        return age
    if isinstance(age, float):
        return int(age) if age == age else None
    if isinstance(age, str):
        stripped = age.strip()
        try:
            return int(stripped, 10)
        except ValueError:
            return None
    return None


def in_age_group(age: Any, group: str) -> bool:
    """Return True if ``age`` falls inside bracket ``group``.

    Unparseable ages never match. An unknown bracket key does not restrict.
    """
    years = _coerce_age(age)
    if years is None:
        return False
    bounds = AGE_BRACKETS.get(group)
    if bounds is None:
        return True
    low, high = bounds
    return years >= low and (high is None or years <= high)


def apply_filters(
    rows: Iterable[RankedCompetitor], filters: LeaderboardFilters
) -> list[RankedCompetitor]:
    filtered = list(rows)
    if not _is_unset(filters.division):
        filtered = [row for row in filtered if row.division == filters.division]
    if not _is_unset(filters.sex):
        filtered = [row for row in filtered if row.sex == filters.sex]
    if not _is_unset(filters.age_group):
        filtered = [row for row in filtered if in_age_group(row.age, filters.age_group)]
    if filters.search:
        needle = filters.search.lower()
        filtered = [row for row in filtered if needle in row.name.lower()]
    return filtered


def sort_leaderboard(rows: Iterable[RankedCompetitor]) -> list[RankedCompetitor]:
    """Most counted events first, then fewest total points."""
    return sorted(rows, key=lambda row: (-row.participation, row.total_points))
