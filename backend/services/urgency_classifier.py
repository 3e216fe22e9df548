from __future__ import annotations

from enum import Enum
from typing import Sequence

from services.temporal_config import TemporalConfig


class TimeCategory(str, Enum):
    MORNING = "morning"
    DAY = "day"
    EVENING = "evening"
    NIGHT = "night"


class UrgencyLevel(str, Enum):
    NONE = "none"
    UPCOMING = "upcoming"
    ACTIVE = "active"
    URGENT = "urgent"
    CRITICAL = "critical"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, UrgencyLevel):
            return NotImplemented
        return self.severity < other.severity

    def __le__(self, other: object) -> bool:
        if not isinstance(other, UrgencyLevel):
            return NotImplemented
        return self.severity <= other.severity

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, UrgencyLevel):
            return NotImplemented
        return self.severity > other.severity

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, UrgencyLevel):
            return NotImplemented
        return self.severity >= other.severity


_SEVERITY: dict[UrgencyLevel, int] = {
    UrgencyLevel.NONE: 0,
    UrgencyLevel.UPCOMING: 1,
    UrgencyLevel.ACTIVE: 2,
    UrgencyLevel.URGENT: 3,
    UrgencyLevel.CRITICAL: 4,
}


def time_category(hour: int) -> TimeCategory:
    if 6 <= hour < 12:
        return TimeCategory.MORNING
    if 12 <= hour < 18:
        return TimeCategory.DAY
    if 18 <= hour < 22:
        return TimeCategory.EVENING
    return TimeCategory.NIGHT


def in_hour_window(hour: int, start: int, end: int) -> bool:
    """Half-open ``[start, end)``; wraps past midnight when ``start > end``."""
    if start > end:
        return hour >= start or hour < end
    return start <= hour < end


def is_reflection_window(hour: int, config: TemporalConfig) -> bool:
    return in_hour_window(hour, config.reflection_start_hour, config.reflection_end_hour)


def is_night_mode(hour: int, config: TemporalConfig) -> bool:
    return in_hour_window(hour, config.night_mode_start_hour, config.night_mode_end_hour)


def is_one_hour_before_reflection(hour: int, config: TemporalConfig) -> bool:
    # No wrap: a window starting at 0 never has an "hour before".
    return hour == config.reflection_start_hour - 1


def classify(
    unreflected_dates: Sequence[str],
    category: TimeCategory,
    reflection_window: bool,
    one_hour_before_window: bool,
) -> UrgencyLevel:
    count = len(unreflected_dates)
    if count == 0:
        return UrgencyLevel.NONE
    if count >= 2 and category == TimeCategory.NIGHT:
        return UrgencyLevel.CRITICAL
    if reflection_window and count >= 1:
        return UrgencyLevel.URGENT
    if reflection_window:
        return UrgencyLevel.ACTIVE
    if one_hour_before_window:
        return UrgencyLevel.UPCOMING
    return UrgencyLevel.NONE


def classify_at(unreflected_dates: Sequence[str], hour: int, config: TemporalConfig) -> UrgencyLevel:
    return classify(
        unreflected_dates,
        time_category(hour),
        is_reflection_window(hour, config),
        is_one_hour_before_reflection(hour, config),
    )
