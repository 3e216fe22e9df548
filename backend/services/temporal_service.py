from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any

from services.clock_source import ClockSnapshot, ClockSource
from services.fault_reporter import FaultReporter, LoggingFaultReporter
from services.plan_store import PlanStore, goal_counts, read_day_plan, read_reflection
from services.presentation_mapper import PresentationMode, presentation_mode, status_message
from services.smart_date_resolver import Provisional, Resolved, SmartDateResolver
from services.temporal_config import TemporalConfig
from services.unreflected_scanner import DEFAULT_WINDOW_DAYS, UnreflectedDayScanner
from services.urgency_classifier import (
    UrgencyLevel,
    classify_at,
    is_night_mode,
    is_reflection_window,
    time_category,
)
from utils.datetime_utils import shift_date_key


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProvisionalDays:
    dates: tuple[str, ...]
    from_cache: bool

    provisional = True


@dataclass(frozen=True)
class ProvisionalUrgency:
    level: UrgencyLevel
    from_cache: bool

    provisional = True


@dataclass(frozen=True)
class _Evaluation:
    config: TemporalConfig
    now: ClockSnapshot
    smart: Resolved
    unreflected: list[str]
    urgency: UrgencyLevel


class TemporalService:
    """Owns the temporal config and answers "which day is it" questions for the UI."""

    def __init__(
        self,
        config: TemporalConfig | None = None,
        clock: ClockSource | None = None,
        reporter: FaultReporter | None = None,
        *,
        window_days: int = DEFAULT_WINDOW_DAYS,
        cache_max_entries: int = 8,
    ) -> None:
        self._config = config or TemporalConfig()
        self.clock = clock or ClockSource()
        self.reporter = reporter or LoggingFaultReporter()
        self.window_days = window_days
        self.resolver = SmartDateResolver(self.clock, self.reporter)
        self.scanner = UnreflectedDayScanner(self.clock, self.reporter)
        self._cache_max_entries = max(int(cache_max_entries), 1)
        self._scan_cache: OrderedDict[tuple[str, int], tuple[str, ...]] = OrderedDict()

    @property
    def config(self) -> TemporalConfig:
        return self._config

    def update_config(self, **partial: Any) -> TemporalConfig:
        previous = self._config
        self._config = previous.merged(**partial)
        if self._config != previous:
            logger.info("Temporal config updated: %s", self._config.to_dict())
            if self._config.day_offset != previous.day_offset:
                self.invalidate_fast_cache()
        return self._config

    def invalidate_fast_cache(self) -> None:
        self._scan_cache.clear()

    def _remember_scan(self, today: str, window_days: int, dates: list[str]) -> None:
        key = (today, int(window_days))
        self._scan_cache[key] = tuple(dates)
        self._scan_cache.move_to_end(key)
        while len(self._scan_cache) > self._cache_max_entries:
            self._scan_cache.popitem(last=False)

    async def _scan(
        self,
        store: PlanStore,
        config: TemporalConfig,
        window_days: int,
        now: ClockSnapshot,
    ) -> list[str]:
        dates = await self.scanner.scan(store, config, window_days, now)
        self._remember_scan(now.effective_today, window_days, dates)
        return dates

    async def _evaluate(self, store: PlanStore, config: TemporalConfig, now: ClockSnapshot) -> _Evaluation:
        smart = await self.resolver.resolve(store, config, now)
        unreflected = await self._scan(store, config, self.window_days, now)
        return _Evaluation(
            config=config,
            now=now,
            smart=smart,
            unreflected=unreflected,
            urgency=classify_at(unreflected, now.effective_hour, config),
        )

    async def get_effective_today(self, store: PlanStore) -> Resolved:
        config = self._config
        return await self.resolver.resolve(store, config, self.clock.snapshot(config))

    def get_effective_today_fast(self) -> Provisional:
        return self.resolver.resolve_fast(self._config)

    async def get_unreflected_days(self, store: PlanStore, window_days: int | None = None) -> list[str]:
        config = self._config
        window = self.window_days if window_days is None else int(window_days)
        return await self._scan(store, config, window, self.clock.snapshot(config))

    def _cached_scan(self, now: ClockSnapshot, window_days: int | None) -> ProvisionalDays:
        window = self.window_days if window_days is None else int(window_days)
        cached = self._scan_cache.get((now.effective_today, window))
        if cached is None:
            return ProvisionalDays(dates=(), from_cache=False)
        return ProvisionalDays(dates=cached, from_cache=True)

    def get_unreflected_days_fast(self, window_days: int | None = None) -> ProvisionalDays:
        return self._cached_scan(self.clock.snapshot(self._config), window_days)

    async def get_urgency(self, store: PlanStore) -> UrgencyLevel:
        config = self._config
        now = self.clock.snapshot(config)
        unreflected = await self._scan(store, config, self.window_days, now)
        return classify_at(unreflected, now.effective_hour, config)

    def get_urgency_fast(self) -> ProvisionalUrgency:
        config = self._config
        now = self.clock.snapshot(config)
        days = self._cached_scan(now, None)
        level = classify_at(days.dates, now.effective_hour, config)
        return ProvisionalUrgency(level=level, from_cache=days.from_cache)

    async def get_presentation_mode(self, store: PlanStore) -> PresentationMode:
        return presentation_mode(await self.get_urgency(store))

    async def get_status_message(
        self,
        store: PlanStore,
        total_goals: int | None = None,
        completed_goals: int | None = None,
    ) -> str:
        """Missing counts are taken from the plan of the resolved day."""
        config = self._config
        evaluation = await self._evaluate(store, config, self.clock.snapshot(config))
        if total_goals is None or completed_goals is None:
            plan = await read_day_plan(store, evaluation.smart.date, self.reporter)
            plan_total, plan_completed = goal_counts(plan)
            if total_goals is None:
                total_goals = plan_total
            if completed_goals is None:
                completed_goals = plan_completed
        reflection = await read_reflection(store, evaluation.smart.date, self.reporter)
        return status_message(
            evaluation.urgency,
            total_goals,
            completed_goals,
            has_reflection=reflection is not None,
            unreflected_count=len(evaluation.unreflected),
        )

    async def get_planning_date(self, store: PlanStore) -> str:
        config = self._config
        return await self._planning_date(store, config, self.clock.snapshot(config))

    async def _planning_date(
        self,
        store: PlanStore,
        config: TemporalConfig,
        now: ClockSnapshot,
        smart: Resolved | None = None,
    ) -> str:
        if smart is None:
            smart = await self.resolver.resolve(store, config, now)
        actual_today = now.effective_today
        if is_night_mode(now.effective_hour, config):
            # Carryover keeps "today" on yesterday; new plans still go to the calendar day.
            if smart.date != actual_today:
                return actual_today
            return smart.date
        return shift_date_key(smart.date, 1)

    async def get_date_logic_info(self, store: PlanStore) -> dict[str, Any]:
        config = self._config
        now = self.clock.snapshot(config)
        smart = await self.resolver.resolve(store, config, now)
        planning_date = await self._planning_date(store, config, now, smart)
        actual_today = now.effective_today
        hour = now.effective_hour

        if is_night_mode(hour, config):
            if smart.date != actual_today:
                explanation = f"It is {hour}:xx at night. Planning for the actual calendar day ({actual_today})."
            else:
                explanation = f"It is {hour}:xx at night. Planning for today ({smart.date})."
        else:
            explanation = f"It is {hour}:xx. Planning for tomorrow ({planning_date})."

        return {
            "actual_today": actual_today,
            "smart_today": smart.date,
            "planning_date": planning_date,
            "current_hour": hour,
            "explanation": explanation,
        }

    async def get_diagnostics(self, store: PlanStore) -> dict[str, Any]:
        config = self._config
        evaluation = await self._evaluate(store, config, self.clock.snapshot(config))
        now = evaluation.now
        hour = now.effective_hour
        return {
            "raw_date": now.raw_today,
            "effective_date": now.effective_today,
            "raw_hour": now.raw_hour,
            "effective_hour": hour,
            "time_category": time_category(hour).value,
            "is_reflection_window": is_reflection_window(hour, config),
            "is_night_mode": is_night_mode(hour, config),
            "smart_today": evaluation.smart.date,
            "smart_today_reason": evaluation.smart.reason,
            "unreflected_days": list(evaluation.unreflected),
            "urgency": evaluation.urgency.value,
            "presentation_mode": presentation_mode(evaluation.urgency).value,
            "config": config.to_dict(),
            "fast_cache_entries": len(self._scan_cache),
            "recent_faults": list(getattr(self.reporter, "faults", [])),
        }
