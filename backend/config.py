from pydantic_settings import BaseSettings
from pathlib import Path

from services.temporal_config import TemporalConfig


class Settings(BaseSettings):
    ENVIRONMENT: str = "development"  # development | test | staging | production
    APP_NAME: str = "Daily Reflection Planner"
    DATABASE_URL: str = "sqlite:///data/reflection.db"
    DATA_DIR: Path = Path("data")
    CORS_ORIGINS: list[str] = [
        "http://localhost:8081",
        "http://localhost:19006",
        "http://127.0.0.1:8081",
    ]
    LOG_LEVEL: str = "INFO"
    DEBUG_TOOLS_ENABLED: bool = True
    REFLECTION_START_HOUR: int = 20
    REFLECTION_END_HOUR: int = 6
    NIGHT_MODE_START_HOUR: int = 0
    NIGHT_MODE_END_HOUR: int = 6
    DAY_OFFSET: int = 0  # whole days, simulation only
    UNREFLECTED_WINDOW_DAYS: int = 3
    FAST_CACHE_MAX_ENTRIES: int = 8

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def is_production_like(self) -> bool:
        return (self.ENVIRONMENT or "").strip().lower() in {"production", "prod", "staging"}

    def temporal_defaults(self) -> TemporalConfig:
        return TemporalConfig(
            reflection_start_hour=self.REFLECTION_START_HOUR,
            reflection_end_hour=self.REFLECTION_END_HOUR,
            night_mode_start_hour=self.NIGHT_MODE_START_HOUR,
            night_mode_end_hour=self.NIGHT_MODE_END_HOUR,
            day_offset=self.DAY_OFFSET,
        )

    def validate_runtime_configuration(self) -> None:
        if not self.is_production_like:
            return

        errors: list[str] = []
        if self.DEBUG_TOOLS_ENABLED:
            errors.append("DEBUG_TOOLS_ENABLED must be false in production-like environments")
        if self.DAY_OFFSET != 0:
            errors.append("DAY_OFFSET must be 0 in production-like environments")
        if self.UNREFLECTED_WINDOW_DAYS < 1:
            errors.append("UNREFLECTED_WINDOW_DAYS must be at least 1")
        if errors:
            joined = "; ".join(errors)
            raise RuntimeError(f"Unsafe production configuration: {joined}")


settings = Settings()
settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
