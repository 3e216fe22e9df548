from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol


logger = logging.getLogger(__name__)


class FaultReporter(Protocol):
    def report(self, operation: str, date_key: str, error: Exception) -> None: ...


class LoggingFaultReporter:
    def report(self, operation: str, date_key: str, error: Exception) -> None:
        logger.warning("Storage read %s(%s) failed, treating as absent: %s", operation, date_key, error)


@dataclass
class RecordingFaultReporter:
    """Keeps faults in memory; used by the diagnostics surface and tests."""

    faults: list[dict[str, str]] = field(default_factory=list)
    limit: int = 50

    def report(self, operation: str, date_key: str, error: Exception) -> None:
        logger.warning("Storage read %s(%s) failed, treating as absent: %s", operation, date_key, error)
        self.faults.append(
            {
                "operation": operation,
                "date": date_key,
                "error": f"{type(error).__name__}: {error}",
            }
        )
        if len(self.faults) > self.limit:
            del self.faults[: len(self.faults) - self.limit]
