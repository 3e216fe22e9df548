from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from api.dependencies import get_temporal_service, require_date_key
from db.database import get_db
from services.reflection_service import (
    delete_reflection,
    get_reflection,
    list_reflections,
    reflection_to_dict,
    save_reflection,
)
from services.temporal_service import TemporalService

router = APIRouter(prefix="/reflections", tags=["reflections"])


class ReflectionSaveRequest(BaseModel):
    completed_goal_ids: list[int] = Field(default_factory=list)
    missed_goals: dict[str, str] = Field(default_factory=dict)
    goal_feedback: dict[str, str] = Field(default_factory=dict)
    overall_feeling: Optional[int] = Field(default=None, ge=1, le=5)
    notes: Optional[str] = None


@router.get("")
def all_reflections(
    limit: int = Query(default=100, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    return [reflection_to_dict(r) for r in list_reflections(db, limit=limit)]


@router.get("/{date}")
def read_reflection(
    date: str = Depends(require_date_key),
    db: Session = Depends(get_db),
):
    reflection = get_reflection(db, date)
    if not reflection:
        raise HTTPException(status_code=404, detail="Reflection not found")
    return reflection_to_dict(reflection)


@router.put("/{date}")
def write_reflection(
    req: ReflectionSaveRequest,
    date: str = Depends(require_date_key),
    db: Session = Depends(get_db),
    temporal: TemporalService = Depends(get_temporal_service),
):
    try:
        reflection = save_reflection(
            db,
            date,
            completed_goal_ids=req.completed_goal_ids,
            missed_goals=req.missed_goals,
            goal_feedback=req.goal_feedback,
            overall_feeling=req.overall_feeling,
            notes=req.notes,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    db.commit()
    db.refresh(reflection)
    temporal.invalidate_fast_cache()
    return reflection_to_dict(reflection)


@router.delete("/{date}")
def remove_reflection(
    date: str = Depends(require_date_key),
    db: Session = Depends(get_db),
    temporal: TemporalService = Depends(get_temporal_service),
):
    try:
        delete_reflection(db, date)
    except LookupError:
        raise HTTPException(status_code=404, detail="Reflection not found")
    db.commit()
    temporal.invalidate_fast_cache()
    return {"status": "deleted", "date": date}
