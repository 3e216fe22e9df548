from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from db.models import DayPlan, Goal
from utils.datetime_utils import parse_date_key, utcnow


GOAL_CATEGORIES = {
    "health",
    "productivity",
    "household",
    "practical",
    "personal_development",
    "entertainment",
    "social",
    "finance",
    "shopping",
    "other",
}
MISSED_REASONS = {
    "no_motivation",
    "too_tired",
    "no_time",
    "forgot",
    "unexpected",
    "too_difficult",
    "distraction",
    "wrong_goal",
    "other",
}
_EDITABLE_FIELDS = ("title", "description", "category", "subcategory", "time_slot")


def _normalize_category(raw: str | None) -> str:
    value = str(raw or "").strip().lower()
    return value if value in GOAL_CATEGORIES else "other"


def goal_to_dict(goal: Goal) -> dict[str, Any]:
    missed = None
    if goal.missed_reason:
        missed = {
            "reason": goal.missed_reason,
            "notes": goal.missed_notes,
            "missed_at": goal.missed_at.isoformat() if goal.missed_at else None,
        }
    return {
        "id": goal.id,
        "title": goal.title,
        "description": goal.description,
        "category": goal.category,
        "subcategory": goal.subcategory,
        "time_slot": goal.time_slot,
        "completed": bool(goal.completed),
        "completed_at": goal.completed_at.isoformat() if goal.completed_at else None,
        "missed": missed,
        "plan_date": goal.day_plan.date if goal.day_plan else None,
        "created_at": goal.created_at.isoformat() if goal.created_at else None,
    }


def day_plan_to_dict(date: str, plan: DayPlan | None) -> dict[str, Any]:
    goals = [goal_to_dict(g) for g in plan.goals] if plan else []
    return {
        "date": date,
        "exists": plan is not None,
        "goals": goals,
        "total_goals": len(goals),
        "completed_goals": sum(1 for g in goals if g["completed"]),
    }


def get_day_plan(db: Session, date: str) -> DayPlan | None:
    parse_date_key(date)
    return db.query(DayPlan).filter(DayPlan.date == date).first()


def ensure_day_plan(db: Session, date: str) -> DayPlan:
    plan = get_day_plan(db, date)
    if plan is None:
        plan = DayPlan(date=date)
        db.add(plan)
        db.flush()
    return plan


def _get_goal(db: Session, date: str, goal_id: int) -> Goal:
    plan = get_day_plan(db, date)
    goal = None
    if plan is not None:
        goal = db.query(Goal).filter(Goal.id == goal_id, Goal.day_plan_id == plan.id).first()
    if goal is None:
        raise LookupError("Goal not found")
    return goal


def add_goal(
    db: Session,
    date: str,
    *,
    title: str,
    description: str | None = None,
    category: str | None = None,
    subcategory: str | None = None,
    time_slot: str | None = None,
) -> Goal:
    clean_title = (title or "").strip()
    if not clean_title:
        raise ValueError("Goal title is required")
    plan = ensure_day_plan(db, date)
    goal = Goal(
        title=clean_title,
        description=description,
        category=_normalize_category(category),
        subcategory=subcategory,
        time_slot=time_slot,
        completed=False,
    )
    plan.goals.append(goal)
    db.flush()
    return goal


def update_goal(db: Session, date: str, goal_id: int, updates: dict[str, Any]) -> Goal:
    goal = _get_goal(db, date, goal_id)
    for field_name in _EDITABLE_FIELDS:
        if field_name not in updates or updates[field_name] is None:
            continue
        value = updates[field_name]
        if field_name == "title":
            value = str(value).strip()
            if not value:
                raise ValueError("Goal title cannot be empty")
        if field_name == "category":
            value = _normalize_category(value)
        setattr(goal, field_name, value)
    if updates.get("completed") is not None:
        _set_completed(goal, bool(updates["completed"]))
    goal.updated_at = utcnow()
    db.flush()
    return goal


def _set_completed(goal: Goal, completed: bool) -> None:
    goal.completed = completed
    goal.completed_at = utcnow() if completed else None


def toggle_goal(db: Session, date: str, goal_id: int) -> Goal:
    goal = _get_goal(db, date, goal_id)
    _set_completed(goal, not bool(goal.completed))
    goal.updated_at = utcnow()
    db.flush()
    return goal


def delete_goal(db: Session, date: str, goal_id: int) -> None:
    goal = _get_goal(db, date, goal_id)
    plan = goal.day_plan
    plan.goals.remove(goal)
    db.flush()


def mark_goal_missed(
    db: Session,
    date: str,
    goal_id: int,
    *,
    reason: str,
    notes: str | None = None,
) -> Goal | None:
    """Record why a goal was missed. ``wrong_goal`` removes it entirely and returns None."""
    clean_reason = str(reason or "").strip().lower()
    if clean_reason not in MISSED_REASONS:
        raise ValueError(f"reason must be one of {sorted(MISSED_REASONS)}")
    if clean_reason == "wrong_goal":
        delete_goal(db, date, goal_id)
        return None

    goal = _get_goal(db, date, goal_id)
    goal.missed_reason = clean_reason
    goal.missed_notes = notes
    goal.missed_at = utcnow()
    goal.updated_at = utcnow()
    db.flush()
    return goal
