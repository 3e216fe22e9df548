from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable

from services.temporal_config import TemporalConfig
from utils.datetime_utils import date_key, local_now


@dataclass(frozen=True)
class ClockSnapshot:
    """One wall-clock reading, with and without the day offset applied."""

    raw_today: str
    effective_today: str
    raw_hour: int
    effective_hour: int


class ClockSource:
    """Local wall-clock reader. The day offset moves the date, never the real hour."""

    def __init__(self, now: Callable[[], datetime] | None = None) -> None:
        self._now = now or local_now

    def snapshot(self, config: TemporalConfig) -> ClockSnapshot:
        # A single read: date and hour must come from the same instant.
        current = self._now()
        raw = date(current.year, current.month, current.day)
        offset = int(config.day_offset or 0)
        shifted = current + timedelta(days=offset) if offset else current
        return ClockSnapshot(
            raw_today=date_key(raw),
            effective_today=date_key(raw + timedelta(days=offset)),
            raw_hour=current.hour,
            effective_hour=shifted.hour,
        )

    def raw_date(self) -> date:
        current = self._now()
        return date(current.year, current.month, current.day)

    def raw_today(self) -> str:
        return date_key(self.raw_date())

    def effective_today(self, config: TemporalConfig) -> str:
        return self.snapshot(config).effective_today

    def current_hour(self) -> int:
        return self._now().hour

    def effective_hour(self, config: TemporalConfig) -> int:
        return self.snapshot(config).effective_hour
