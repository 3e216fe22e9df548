from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from api.dependencies import get_temporal_service, require_date_key
from db.database import get_db
from services.day_plan_service import (
    add_goal,
    day_plan_to_dict,
    delete_goal,
    get_day_plan,
    goal_to_dict,
    mark_goal_missed,
    toggle_goal,
    update_goal,
)
from services.temporal_service import TemporalService
from utils.datetime_utils import relative_date_label

router = APIRouter(prefix="/days", tags=["days"])


class GoalCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    description: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    time_slot: Optional[str] = None


class GoalUpdateRequest(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=300)
    description: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    time_slot: Optional[str] = None
    completed: Optional[bool] = None


class GoalMissedRequest(BaseModel):
    reason: str
    notes: Optional[str] = None


@router.get("/{date}")
def read_day(
    date: str = Depends(require_date_key),
    db: Session = Depends(get_db),
    temporal: TemporalService = Depends(get_temporal_service),
):
    payload = day_plan_to_dict(date, get_day_plan(db, date))
    payload["label"] = relative_date_label(date, temporal.get_effective_today_fast().date)
    return payload


@router.post("/{date}/goals", status_code=201)
def create_goal(
    req: GoalCreateRequest,
    date: str = Depends(require_date_key),
    db: Session = Depends(get_db),
    temporal: TemporalService = Depends(get_temporal_service),
):
    try:
        goal = add_goal(
            db,
            date,
            title=req.title,
            description=req.description,
            category=req.category,
            subcategory=req.subcategory,
            time_slot=req.time_slot,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    db.commit()
    db.refresh(goal)
    temporal.invalidate_fast_cache()
    return goal_to_dict(goal)


@router.put("/{date}/goals/{goal_id}")
def edit_goal(
    goal_id: int,
    req: GoalUpdateRequest,
    date: str = Depends(require_date_key),
    db: Session = Depends(get_db),
):
    try:
        goal = update_goal(db, date, goal_id, req.model_dump(exclude_none=True))
    except LookupError:
        raise HTTPException(status_code=404, detail="Goal not found")
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    db.commit()
    db.refresh(goal)
    return goal_to_dict(goal)


@router.post("/{date}/goals/{goal_id}/toggle")
def toggle_goal_completion(
    goal_id: int,
    date: str = Depends(require_date_key),
    db: Session = Depends(get_db),
):
    try:
        goal = toggle_goal(db, date, goal_id)
    except LookupError:
        raise HTTPException(status_code=404, detail="Goal not found")
    db.commit()
    db.refresh(goal)
    return goal_to_dict(goal)


@router.post("/{date}/goals/{goal_id}/missed")
def mark_missed(
    goal_id: int,
    req: GoalMissedRequest,
    date: str = Depends(require_date_key),
    db: Session = Depends(get_db),
    temporal: TemporalService = Depends(get_temporal_service),
):
    try:
        goal = mark_goal_missed(db, date, goal_id, reason=req.reason, notes=req.notes)
    except LookupError:
        raise HTTPException(status_code=404, detail="Goal not found")
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    db.commit()
    if goal is None:
        temporal.invalidate_fast_cache()
        return {"status": "deleted", "id": goal_id}
    db.refresh(goal)
    return goal_to_dict(goal)


@router.delete("/{date}/goals/{goal_id}")
def remove_goal(
    goal_id: int,
    date: str = Depends(require_date_key),
    db: Session = Depends(get_db),
    temporal: TemporalService = Depends(get_temporal_service),
):
    try:
        delete_goal(db, date, goal_id)
    except LookupError:
        raise HTTPException(status_code=404, detail="Goal not found")
    db.commit()
    temporal.invalidate_fast_cache()
    return {"status": "deleted", "id": goal_id}
