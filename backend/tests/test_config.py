from __future__ import annotations

import sys
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import Settings  # noqa: E402


def test_temporal_defaults_follow_settings():
    settings = Settings(
        REFLECTION_START_HOUR=21,
        REFLECTION_END_HOUR=5,
        NIGHT_MODE_START_HOUR=23,
        NIGHT_MODE_END_HOUR=4,
        DAY_OFFSET=-1,
    )
    config = settings.temporal_defaults()
    assert config.to_dict() == {
        "reflection_start_hour": 21,
        "reflection_end_hour": 5,
        "night_mode_start_hour": 23,
        "night_mode_end_hour": 4,
        "day_offset": -1,
    }


def test_production_gate_rejects_debug_tools_and_day_offset():
    settings = Settings(ENVIRONMENT="production", DEBUG_TOOLS_ENABLED=True, DAY_OFFSET=2)
    with pytest.raises(RuntimeError) as excinfo:
        settings.validate_runtime_configuration()
    assert "DEBUG_TOOLS_ENABLED" in str(excinfo.value)
    assert "DAY_OFFSET" in str(excinfo.value)


def test_production_gate_accepts_safe_values_and_skips_development():
    Settings(ENVIRONMENT="production", DEBUG_TOOLS_ENABLED=False, DAY_OFFSET=0).validate_runtime_configuration()
    Settings(ENVIRONMENT="development", DEBUG_TOOLS_ENABLED=True, DAY_OFFSET=5).validate_runtime_configuration()
