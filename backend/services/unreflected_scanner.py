from __future__ import annotations

from services.clock_source import ClockSnapshot, ClockSource
from services.fault_reporter import FaultReporter
from services.plan_store import PlanStore, is_unreflected
from services.temporal_config import TemporalConfig
from utils.datetime_utils import shift_date_key


DEFAULT_WINDOW_DAYS = 3


class UnreflectedDayScanner:
    def __init__(self, clock: ClockSource, reporter: FaultReporter) -> None:
        self.clock = clock
        self.reporter = reporter

    async def scan(
        self,
        store: PlanStore,
        config: TemporalConfig,
        window_days: int = DEFAULT_WINDOW_DAYS,
        now: ClockSnapshot | None = None,
    ) -> list[str]:
        """Days before today (most recent first) that have goals but no reflection."""
        today = (now or self.clock.snapshot(config)).effective_today
        found: list[str] = []
        for days_back in range(1, max(int(window_days), 0) + 1):
            candidate = shift_date_key(today, -days_back)
            if await is_unreflected(store, candidate, self.reporter):
                found.append(candidate)
        return found
