from __future__ import annotations

import asyncio
import sys
from datetime import datetime
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from db.database import Base  # noqa: E402
from services.clock_source import ClockSource  # noqa: E402
from services.day_plan_service import add_goal  # noqa: E402
from services.fault_reporter import RecordingFaultReporter  # noqa: E402
from services.plan_store import SqlPlanStore  # noqa: E402
from services.reflection_service import save_reflection  # noqa: E402
from services.temporal_config import TemporalConfig  # noqa: E402
from services.unreflected_scanner import UnreflectedDayScanner  # noqa: E402


def _new_db():
    engine = create_engine("sqlite:///:memory:", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)()


def _scanner() -> UnreflectedDayScanner:
    clock = ClockSource(now=lambda: datetime(2026, 3, 10, 12, 0))
    return UnreflectedDayScanner(clock, RecordingFaultReporter())


def _plan(db, date: str, *, reflected: bool) -> None:
    goal = add_goal(db, date, title=f"Goal for {date}")
    if reflected:
        save_reflection(db, date, completed_goal_ids=[goal.id])


def test_only_the_middle_unreflected_day_is_reported():
    db = _new_db()
    _plan(db, "2026-03-09", reflected=True)
    _plan(db, "2026-03-08", reflected=False)
    _plan(db, "2026-03-07", reflected=True)
    db.commit()

    days = asyncio.run(_scanner().scan(SqlPlanStore(db), TemporalConfig(), 3))
    assert days == ["2026-03-08"]


def test_results_are_most_recent_first_and_exclude_today_and_older_days():
    db = _new_db()
    _plan(db, "2026-03-10", reflected=False)
    _plan(db, "2026-03-09", reflected=False)
    _plan(db, "2026-03-07", reflected=False)
    _plan(db, "2026-03-06", reflected=False)
    db.commit()

    days = asyncio.run(_scanner().scan(SqlPlanStore(db), TemporalConfig()))
    assert days == ["2026-03-09", "2026-03-07"]


def test_empty_storage_and_zero_window_yield_nothing():
    db = _new_db()
    store = SqlPlanStore(db)
    assert asyncio.run(_scanner().scan(store, TemporalConfig(), 3)) == []

    _plan(db, "2026-03-09", reflected=False)
    db.commit()
    assert asyncio.run(_scanner().scan(store, TemporalConfig(), 0)) == []


def test_scan_follows_the_day_offset():
    db = _new_db()
    _plan(db, "2026-03-10", reflected=False)
    db.commit()

    days = asyncio.run(_scanner().scan(SqlPlanStore(db), TemporalConfig(day_offset=1), 3))
    assert days == ["2026-03-10"]
