from __future__ import annotations

import json
from typing import Any

from sqlalchemy.orm import Session

from db.models import Reflection
from services.day_plan_service import get_day_plan
from services.presentation_mapper import completion_percentage
from utils.datetime_utils import parse_date_key, utcnow


def _safe_json_loads(raw: str | None, fallback: Any) -> Any:
    if not raw:
        return fallback
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return fallback


def _json_dump(value: Any) -> str:
    return json.dumps(value, ensure_ascii=True)


def reflection_to_dict(reflection: Reflection) -> dict[str, Any]:
    return {
        "id": reflection.id,
        "date": reflection.date,
        "total_goals": reflection.total_goals,
        "completed_goals": reflection.completed_goals,
        "completion_percentage": reflection.completion_percentage,
        "missed_goals": _safe_json_loads(reflection.missed_goals, {}),
        "goal_feedback": _safe_json_loads(reflection.goal_feedback, {}),
        "overall_feeling": reflection.overall_feeling,
        "notes": reflection.notes,
        "created_at": reflection.created_at.isoformat() if reflection.created_at else None,
        "last_modified": reflection.last_modified.isoformat() if reflection.last_modified else None,
    }


def get_reflection(db: Session, date: str) -> Reflection | None:
    parse_date_key(date)
    return db.query(Reflection).filter(Reflection.date == date).first()


def list_reflections(db: Session, limit: int = 100) -> list[Reflection]:
    # Date keys sort chronologically as strings.
    return db.query(Reflection).order_by(Reflection.date.desc()).limit(max(1, min(int(limit), 1000))).all()


def save_reflection(
    db: Session,
    date: str,
    *,
    completed_goal_ids: list[int],
    missed_goals: dict[str, str] | None = None,
    goal_feedback: dict[str, str] | None = None,
    overall_feeling: int | None = None,
    notes: str | None = None,
) -> Reflection:
    """Create or replace the reflection for ``date`` and sync goal completion to it."""
    if overall_feeling is not None and not 1 <= int(overall_feeling) <= 5:
        raise ValueError("overall_feeling must be between 1 and 5")

    plan = get_day_plan(db, date)
    goals = list(plan.goals) if plan else []
    completed_ids = {int(goal_id) for goal_id in completed_goal_ids}
    now = utcnow()

    missed: dict[str, str] = {}
    for goal in goals:
        done = goal.id in completed_ids
        if bool(goal.completed) != done:
            goal.completed = done
            goal.completed_at = now if done else None
        if not done:
            missed[str(goal.id)] = (missed_goals or {}).get(str(goal.id)) or goal.missed_reason or "no_reason"

    total = len(goals)
    completed = sum(1 for g in goals if g.id in completed_ids)

    reflection = get_reflection(db, date)
    if reflection is None:
        reflection = Reflection(date=date, created_at=now)
        db.add(reflection)
    reflection.total_goals = total
    reflection.completed_goals = completed
    reflection.completion_percentage = float(completion_percentage(total, completed))
    reflection.missed_goals = _json_dump(missed)
    reflection.goal_feedback = _json_dump(goal_feedback or {})
    reflection.overall_feeling = overall_feeling
    reflection.notes = notes
    reflection.last_modified = now
    db.flush()
    return reflection


def delete_reflection(db: Session, date: str) -> None:
    reflection = get_reflection(db, date)
    if reflection is None:
        raise LookupError("Reflection not found")
    db.delete(reflection)
    db.flush()
