from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields, replace
from typing import Any


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TemporalConfig:
    """Hour windows (24h, start > end wraps past midnight) and the debug day offset."""

    reflection_start_hour: int = 20
    reflection_end_hour: int = 6
    night_mode_start_hour: int = 0
    night_mode_end_hour: int = 6
    day_offset: int = 0

    def merged(self, **partial: Any) -> TemporalConfig:
        """Return a copy with the known, non-None fields of ``partial`` applied.

        Values are taken as given; range checks belong to the caller.
        """
        known = {f.name for f in fields(self)}
        changes: dict[str, Any] = {}
        for key, value in partial.items():
            if key not in known:
                logger.warning("Ignoring unknown temporal config field: %s", key)
                continue
            if value is None:
                continue
            changes[key] = value
        if not changes:
            return self
        return replace(self, **changes)

    def to_dict(self) -> dict[str, int]:
        return asdict(self)
