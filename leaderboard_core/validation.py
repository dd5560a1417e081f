"""
Input validation schemas using Pydantic v2
Validates raw athlete, workout config and filter payloads
"""

import logging
import math
import re
from typing import Any, Dict, Literal, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .filters import LeaderboardFilters
from .ranking import Competitor
from .scoring import SCORE_TYPE_ALIASES, SCORING_MODES, EventConfig, EventResult, resolve_mode
from .time_format import parse_duration

logger = logging.getLogger(__name__)

# ==================== COERCION HELPERS ====================


def coerce_result(value: Any) -> float:
    """Coerce a raw result to a non-negative number; anything else is 0.

    Text with a colon is read as ``M:SS``.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return 0.0
    elif isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return 0.0
        if ":" in stripped:
            return float(parse_duration(stripped))
        try:
            number = float(stripped)
        except ValueError:
            return 0.0
    else:
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def coerce_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, float):
        return math.isfinite(value) and value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "y", "on"}
    return False


class CompetitorRecord(BaseModel):
    """Athlete snapshot record; per-event values arrive as extra flat keys."""

    id: str = Field(..., min_length=1, max_length=128, description="Athlete id")
    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    division: Literal["Rx", "Scaled", "Foundations"]
    gender: Literal["M", "F"]
    age: Optional[int] = Field(None, ge=0, le=150, description="Age in years")
    gymId: Optional[str] = Field(None, max_length=128)

    @field_validator("id", "gymId", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("name", mode="before")
    @classmethod
    def sanitize_name(cls, v: Any) -> Any:
        if not isinstance(v, str):
            return v
        return InputSanitizer.sanitize_competitor_name(v)

    @field_validator("division", "gender", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("age", mode="before")
    @classmethod
    def coerce_age(cls, v: Any) -> Optional[int]:
        """Unparseable or out-of-range ages become unknown instead of failing."""
        if v is None or isinstance(v, bool):
            return None
        if isinstance(v, float):
            v = int(v) if math.isfinite(v) else None
        elif isinstance(v, str):
            try:
                v = int(v.strip(), 10)
            except ValueError:
                logger.debug(f"Unparseable age {v!r} treated as unknown")
                return None
        if not isinstance(v, int) or v < 0 or v > 150:
            return None
        return v

    def results_for(self, event_ids: Sequence[str]) -> Dict[str, EventResult]:
        extra = self.model_extra or {}
        results: Dict[str, EventResult] = {}
        for event_id in event_ids:
            tiebreak = coerce_result(extra.get(f"{event_id}_tiebreaker"))
            results[event_id] = EventResult(
                raw=coerce_result(extra.get(event_id)),
                capped=coerce_flag(extra.get(f"{event_id}_capped")),
                tiebreak_seconds=tiebreak or None,
                verified=coerce_flag(extra.get(f"{event_id}_verified")),
            )
        return results

    def to_competitor(self, event_ids: Sequence[str]) -> Competitor:
        return Competitor(
            id=self.id,
            name=self.name,
            division=self.division,
            sex=self.gender,
            age=self.age,
            results=self.results_for(event_ids),
            gym_id=self.gymId,
        )

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class EventConfigRecord(BaseModel):
    """Workout configuration record."""

    id: str = Field(..., min_length=1, max_length=32)
    name: str = Field("", max_length=100)
    scoreType: str = Field("reps", description="Score type or scoring mode")
    unit: Optional[str] = Field(None, max_length=20)
    published: bool = False
    hasTiebreaker: bool = False
    timeCap: Optional[int] = Field(None, ge=0, le=86400, description="Time cap in seconds")

    @field_validator("scoreType")
    @classmethod
    def validate_score_type(cls, v: str) -> str:
        """Validate score type and normalize it to a scoring mode"""
        mode = resolve_mode(v)
        if mode is None:
            allowed = sorted(set(SCORE_TYPE_ALIASES) | set(SCORING_MODES))
            raise ValueError(f"scoreType must be one of {allowed}, got {v}")
        if mode != v:
            logger.debug(f"Normalized scoreType: {v} → {mode}")
        return mode

    def to_event_config(self) -> EventConfig:
        return EventConfig(
            id=self.id,
            mode=resolve_mode(self.scoreType) or "higher_is_better",
            published=self.published,
            has_tiebreaker=self.hasTiebreaker,
            time_cap=self.timeCap,
            name=self.name,
            unit=self.unit,
        )

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class FilterRecord(BaseModel):
    """Leaderboard display filters; 'all' or empty means no filter."""

    division: str = Field("all", max_length=50)
    gender: str = Field("all", max_length=10)
    ageGroup: str = Field("all", max_length=20)
    search: str = Field("", max_length=255)

    @field_validator("division", "gender", "ageGroup", mode="before")
    @classmethod
    def default_to_all(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return "all"
        return v.strip() if isinstance(v, str) else v

    @field_validator("search", mode="before")
    @classmethod
    def sanitize_search(cls, v: Any) -> Any:
        if v is None:
            return ""
        if isinstance(v, str):
            return InputSanitizer.sanitize_string(v, 255)
        return v

    def to_filters(self) -> LeaderboardFilters:
        return LeaderboardFilters(
            division=self.division,
            sex=self.gender,
            age_group=self.ageGroup,
            search=self.search,
        )

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class InputSanitizer:
    """Utility class for input sanitization"""

    @staticmethod
    def sanitize_string(value: str, max_length: int = 255) -> str:
        """Trim, drop null bytes and cap the length"""
        return str(value).replace("\0", "").strip()[:max_length]

    @staticmethod
    def sanitize_competitor_name(name: str) -> str:
        """Sanitize athlete name for display - preserve accented letters"""
        name = InputSanitizer.sanitize_string(name, 255)

        # Drop markup and control characters; keep letters, digits, spaces, dashes, apostrophes
        dangerous_chars = r'[<>{}[\]\\|;`"\x00-\x1f\x7f]'
        name = re.sub(dangerous_chars, "", name)

        return name.strip()


# ==================== EXPORT ====================

__all__ = [
    "CompetitorRecord",
    "EventConfigRecord",
    "FilterRecord",
    "InputSanitizer",
    "coerce_flag",
    "coerce_result",
]
