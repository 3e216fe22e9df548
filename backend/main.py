import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from config import settings
from db.database import engine, Base
import db.models  # noqa: F401  (registers tables on Base.metadata)
from api.temporal import router as temporal_router
from api.days import router as days_router
from api.reflections import router as reflections_router
from services.fault_reporter import RecordingFaultReporter
from services.temporal_service import TemporalService

settings.validate_runtime_configuration()

logging.basicConfig(
    level=getattr(logging, (settings.LOG_LEVEL or "INFO").upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Create all tables
Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.APP_NAME, version="1.0.0")

# One temporal context per process; the day offset lives only in memory.
app.state.temporal = TemporalService(
    settings.temporal_defaults(),
    reporter=RecordingFaultReporter(),
    window_days=settings.UNREFLECTED_WINDOW_DAYS,
    cache_max_entries=settings.FAST_CACHE_MAX_ENTRIES,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(temporal_router, prefix="/api")
app.include_router(days_router, prefix="/api")
app.include_router(reflections_router, prefix="/api")


@app.get("/api/health")
def health_check():
    return {"status": "ok", "app": settings.APP_NAME}


# Serve frontend static files (in production)
static_dir = Path(__file__).parent / "static"
if static_dir.exists():
    app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")
