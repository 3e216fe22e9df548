from __future__ import annotations

from typing import Any, Protocol

from sqlalchemy.orm import Session

from db.models import DayPlan, Reflection
from services.fault_reporter import FaultReporter


class PlanStore(Protocol):
    """Read side of the storage layer. ``None`` means "no record", exceptions mean a fault."""

    async def get_day_plan(self, date: str) -> Any | None: ...

    async def get_reflection(self, date: str) -> Any | None: ...


class SqlPlanStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    async def get_day_plan(self, date: str) -> DayPlan | None:
        return self.db.query(DayPlan).filter(DayPlan.date == date).first()

    async def get_reflection(self, date: str) -> Reflection | None:
        return self.db.query(Reflection).filter(Reflection.date == date).first()


def _goals_of(plan: Any | None) -> list:
    if plan is None:
        return []
    if isinstance(plan, dict):
        return list(plan.get("goals") or [])
    return list(getattr(plan, "goals", None) or [])


def goal_count(plan: Any | None) -> int:
    return len(_goals_of(plan))


def goal_counts(plan: Any | None) -> tuple[int, int]:
    """(total, completed) for a plan record."""
    goals = _goals_of(plan)
    completed = 0
    for goal in goals:
        done = goal.get("completed") if isinstance(goal, dict) else getattr(goal, "completed", False)
        if done:
            completed += 1
    return len(goals), completed


async def read_day_plan(store: PlanStore, date: str, reporter: FaultReporter) -> Any | None:
    try:
        return await store.get_day_plan(date)
    except Exception as exc:
        reporter.report("get_day_plan", date, exc)
        return None


async def read_reflection(store: PlanStore, date: str, reporter: FaultReporter) -> Any | None:
    try:
        return await store.get_reflection(date)
    except Exception as exc:
        reporter.report("get_reflection", date, exc)
        return None


async def is_unreflected(store: PlanStore, date: str, reporter: FaultReporter) -> bool:
    """A day with at least one goal and no saved reflection."""
    plan = await read_day_plan(store, date, reporter)
    if goal_count(plan) == 0:
        return False
    reflection = await read_reflection(store, date, reporter)
    return reflection is None
