from __future__ import annotations

import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from db.database import Base  # noqa: E402
from db.models import Goal, Reflection  # noqa: E402
from services.day_plan_service import (  # noqa: E402
    add_goal,
    day_plan_to_dict,
    delete_goal,
    get_day_plan,
    mark_goal_missed,
    toggle_goal,
    update_goal,
)
from services.plan_store import goal_counts  # noqa: E402
from services.reflection_service import (  # noqa: E402
    delete_reflection,
    get_reflection,
    list_reflections,
    reflection_to_dict,
    save_reflection,
)


DAY = "2026-03-10"


def _new_db():
    engine = create_engine("sqlite:///:memory:", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)()


def test_add_goal_creates_plan_and_normalizes_category():
    db = _new_db()
    goal = add_goal(db, DAY, title="  Gym session ", category="HEALTH", time_slot="before 09:00")
    other = add_goal(db, DAY, title="Something", category="astrology")
    db.commit()

    plan = get_day_plan(db, DAY)
    assert plan is not None
    assert [g.id for g in plan.goals] == [goal.id, other.id]
    assert goal.title == "Gym session"
    assert goal.category == "health"
    assert other.category == "other"

    payload = day_plan_to_dict(DAY, plan)
    assert payload["total_goals"] == 2
    assert payload["completed_goals"] == 0
    assert payload["goals"][0]["plan_date"] == DAY


def test_add_goal_rejects_blank_title_and_bad_date():
    db = _new_db()
    with pytest.raises(ValueError):
        add_goal(db, DAY, title="   ")
    with pytest.raises(ValueError):
        add_goal(db, "10-03-2026", title="Run")


def test_toggle_and_update_goal_completion():
    db = _new_db()
    goal = add_goal(db, DAY, title="Run")
    db.commit()

    toggle_goal(db, DAY, goal.id)
    db.commit()
    assert goal.completed is True
    assert goal.completed_at is not None
    assert goal_counts(get_day_plan(db, DAY)) == (1, 1)

    update_goal(db, DAY, goal.id, {"completed": False, "title": "Long run", "description": None})
    db.commit()
    assert goal.completed is False
    assert goal.completed_at is None
    assert goal.title == "Long run"


def test_goal_lookup_is_scoped_to_its_day():
    db = _new_db()
    goal = add_goal(db, DAY, title="Run")
    db.commit()
    with pytest.raises(LookupError):
        toggle_goal(db, "2026-03-11", goal.id)
    with pytest.raises(LookupError):
        delete_goal(db, DAY, goal.id + 100)


def test_mark_missed_records_reason_and_wrong_goal_deletes():
    db = _new_db()
    keep = add_goal(db, DAY, title="Run")
    drop = add_goal(db, DAY, title="Typo goal")
    db.commit()

    missed = mark_goal_missed(db, DAY, keep.id, reason="too_tired", notes="Long day")
    assert missed is not None
    assert missed.missed_reason == "too_tired"
    assert missed.missed_at is not None

    assert mark_goal_missed(db, DAY, drop.id, reason="wrong_goal") is None
    db.commit()
    assert db.query(Goal).count() == 1

    with pytest.raises(ValueError):
        mark_goal_missed(db, DAY, keep.id, reason="bored")


def test_delete_goal_leaves_an_empty_plan():
    db = _new_db()
    goal = add_goal(db, DAY, title="Run")
    db.commit()
    delete_goal(db, DAY, goal.id)
    db.commit()
    assert goal_counts(get_day_plan(db, DAY)) == (0, 0)
    assert get_day_plan(db, DAY) is not None


def test_save_reflection_upserts_and_syncs_goal_completion():
    db = _new_db()
    run = add_goal(db, DAY, title="Run")
    read = add_goal(db, DAY, title="Read")
    write = add_goal(db, DAY, title="Write")
    mark_goal_missed(db, DAY, write.id, reason="no_time")
    db.commit()

    first = save_reflection(
        db,
        DAY,
        completed_goal_ids=[run.id],
        missed_goals={str(read.id): "forgot"},
        goal_feedback={str(run.id): "Felt great"},
        overall_feeling=4,
        notes="Decent day",
    )
    db.commit()
    data = reflection_to_dict(first)
    assert data["total_goals"] == 3
    assert data["completed_goals"] == 1
    assert data["completion_percentage"] == 33.0
    assert data["missed_goals"] == {str(read.id): "forgot", str(write.id): "no_time"}
    assert data["goal_feedback"] == {str(run.id): "Felt great"}
    assert run.completed is True

    second = save_reflection(db, DAY, completed_goal_ids=[run.id, read.id])
    db.commit()
    assert second.id == first.id
    assert db.query(Reflection).count() == 1
    assert second.completed_goals == 2
    assert read.completed is True


def test_save_reflection_stores_half_up_percentage():
    db = _new_db()
    goals = [add_goal(db, DAY, title=f"Goal {n}") for n in range(8)]
    db.commit()

    reflection = save_reflection(db, DAY, completed_goal_ids=[g.id for g in goals[:5]])
    db.commit()
    assert reflection.completion_percentage == 63.0


def test_save_reflection_validates_feeling():
    db = _new_db()
    with pytest.raises(ValueError):
        save_reflection(db, DAY, completed_goal_ids=[], overall_feeling=7)


def test_list_and_delete_reflections():
    db = _new_db()
    for day in ("2026-03-08", "2026-03-10", "2026-03-09"):
        save_reflection(db, day, completed_goal_ids=[])
    db.commit()

    assert [r.date for r in list_reflections(db)] == ["2026-03-10", "2026-03-09", "2026-03-08"]

    delete_reflection(db, "2026-03-09")
    db.commit()
    assert get_reflection(db, "2026-03-09") is None
    with pytest.raises(LookupError):
        delete_reflection(db, "2026-03-09")
