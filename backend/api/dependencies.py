from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from config import settings
from db.database import get_db
from services.plan_store import SqlPlanStore
from services.temporal_service import TemporalService
from utils.datetime_utils import is_date_key


def get_temporal_service(request: Request) -> TemporalService:
    return request.app.state.temporal


def get_plan_store(db: Session = Depends(get_db)) -> SqlPlanStore:
    return SqlPlanStore(db)


def require_debug_tools() -> None:
    if not settings.DEBUG_TOOLS_ENABLED:
        raise HTTPException(status_code=404, detail="Not found")


def require_date_key(date: str) -> str:
    if not is_date_key(date):
        raise HTTPException(status_code=422, detail="date must be formatted as YYYY-MM-DD")
    return date
