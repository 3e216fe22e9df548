from __future__ import annotations

from dataclasses import dataclass

from services.clock_source import ClockSnapshot, ClockSource
from services.fault_reporter import FaultReporter
from services.plan_store import PlanStore, goal_count, is_unreflected, read_day_plan
from services.temporal_config import TemporalConfig
from services.urgency_classifier import is_night_mode
from utils.datetime_utils import shift_date_key


REASON_DAYTIME = "daytime"
REASON_UNREFLECTED_YESTERDAY = "unreflected_yesterday"
REASON_PLANNED_TODAY = "planned_today"
REASON_DEFAULT = "default"


@dataclass(frozen=True)
class Resolved:
    """Storage-backed "smart today"."""

    date: str
    reason: str

    provisional = False


@dataclass(frozen=True)
class Provisional:
    """Placeholder computed without storage; replace once the resolved value arrives."""

    date: str

    provisional = True


class SmartDateResolver:
    def __init__(self, clock: ClockSource, reporter: FaultReporter) -> None:
        self.clock = clock
        self.reporter = reporter

    async def resolve(
        self,
        store: PlanStore,
        config: TemporalConfig,
        now: ClockSnapshot | None = None,
    ) -> Resolved:
        now = now or self.clock.snapshot(config)
        calendar_date = now.effective_today

        if not is_night_mode(now.effective_hour, config):
            return Resolved(date=calendar_date, reason=REASON_DAYTIME)

        # Yesterday must be checked before today's plan: a fresh plan for the
        # new date never hides an unreflected previous day.
        yesterday = shift_date_key(calendar_date, -1)
        if await is_unreflected(store, yesterday, self.reporter):
            return Resolved(date=yesterday, reason=REASON_UNREFLECTED_YESTERDAY)

        today_plan = await read_day_plan(store, calendar_date, self.reporter)
        if goal_count(today_plan) > 0:
            return Resolved(date=calendar_date, reason=REASON_PLANNED_TODAY)

        return Resolved(date=calendar_date, reason=REASON_DEFAULT)

    def resolve_fast(self, config: TemporalConfig) -> Provisional:
        return Provisional(date=self.clock.snapshot(config).effective_today)
