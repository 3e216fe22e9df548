from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from api.dependencies import get_plan_store, get_temporal_service, require_debug_tools
from services.plan_store import SqlPlanStore
from services.presentation_mapper import presentation_mode
from services.temporal_service import TemporalService


router = APIRouter(prefix="/temporal", tags=["temporal"])


class TemporalConfigUpdate(BaseModel):
    reflection_start_hour: Optional[int] = None
    reflection_end_hour: Optional[int] = None
    night_mode_start_hour: Optional[int] = None
    night_mode_end_hour: Optional[int] = None
    day_offset: Optional[int] = None


@router.get("/today")
async def effective_today(
    temporal: TemporalService = Depends(get_temporal_service),
    store: SqlPlanStore = Depends(get_plan_store),
):
    resolved = await temporal.get_effective_today(store)
    return {"date": resolved.date, "reason": resolved.reason, "provisional": False}


@router.get("/today/fast")
def effective_today_fast(temporal: TemporalService = Depends(get_temporal_service)):
    provisional = temporal.get_effective_today_fast()
    return {"date": provisional.date, "provisional": True}


@router.get("/planning-date")
async def planning_date(
    temporal: TemporalService = Depends(get_temporal_service),
    store: SqlPlanStore = Depends(get_plan_store),
):
    return await temporal.get_date_logic_info(store)


@router.get("/unreflected")
async def unreflected_days(
    window_days: Optional[int] = Query(default=None, ge=0, le=31),
    temporal: TemporalService = Depends(get_temporal_service),
    store: SqlPlanStore = Depends(get_plan_store),
):
    days = await temporal.get_unreflected_days(store, window_days)
    return {"dates": days, "count": len(days), "provisional": False}


@router.get("/unreflected/fast")
def unreflected_days_fast(
    window_days: Optional[int] = Query(default=None, ge=0, le=31),
    temporal: TemporalService = Depends(get_temporal_service),
):
    days = temporal.get_unreflected_days_fast(window_days)
    return {"dates": list(days.dates), "from_cache": days.from_cache, "provisional": True}


@router.get("/urgency")
async def urgency(
    temporal: TemporalService = Depends(get_temporal_service),
    store: SqlPlanStore = Depends(get_plan_store),
):
    level = await temporal.get_urgency(store)
    return {"urgency": level.value, "presentation_mode": presentation_mode(level).value}


@router.get("/status-message")
async def status_message(
    total_goals: Optional[int] = Query(default=None, ge=0),
    completed_goals: Optional[int] = Query(default=None, ge=0),
    temporal: TemporalService = Depends(get_temporal_service),
    store: SqlPlanStore = Depends(get_plan_store),
):
    message = await temporal.get_status_message(store, total_goals, completed_goals)
    return {"message": message}


@router.get("/diagnostics", dependencies=[Depends(require_debug_tools)])
async def diagnostics(
    temporal: TemporalService = Depends(get_temporal_service),
    store: SqlPlanStore = Depends(get_plan_store),
):
    return await temporal.get_diagnostics(store)


@router.get("/config", dependencies=[Depends(require_debug_tools)])
def get_config(temporal: TemporalService = Depends(get_temporal_service)):
    return temporal.config.to_dict()


@router.patch("/config", dependencies=[Depends(require_debug_tools)])
def update_config(
    payload: TemporalConfigUpdate,
    temporal: TemporalService = Depends(get_temporal_service),
):
    updated = temporal.update_config(**payload.model_dump(exclude_none=True))
    return updated.to_dict()
