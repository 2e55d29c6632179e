"""
In-process store of citizen reports. Single writer; most recent first.
"""
import math
import uuid
from datetime import datetime, timezone
from typing import Any, List, Optional

from ...common.exceptions import ReportValidationError
from ...common.logging import setup_logger
from ...common.schemas import Report, SEVERITY_OPTIONS, DEFAULT_SEVERITY
from ...predictions.domain.protocols import EventPublisher

logger = setup_logger("riesgovial.reports.store")

REPORT_EVENT = "report:new"
INCOMPLETE_REPORT = "Datos del reporte incompletos."
INVALID_SEVERITY = "Severidad del reporte no válida."


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


class ReportStore:
    """
    Bounded most-recent-N list of reports (oldest dropped first).
    Every successful submission is broadcast as a report:new event.
    """

    def __init__(self, publisher: Optional[EventPublisher] = None, max_reports: int = 50):
        self.publisher = publisher
        self.max_reports = max_reports
        self._reports: List[Report] = []

    def __len__(self) -> int:
        return len(self._reports)

    def list(self) -> List[Report]:
        """Snapshot of the stored reports, most recent first."""
        return list(self._reports)

    def validate(
        self,
        description: Any,
        latitude: Any,
        longitude: Any,
        severity: Any = None
    ) -> str:
        """Raises ReportValidationError; returns the resolved severity."""
        if not _is_finite_number(latitude) or not _is_finite_number(longitude):
            raise ReportValidationError(INCOMPLETE_REPORT)
        if not isinstance(description, str) or not description.strip():
            raise ReportValidationError(INCOMPLETE_REPORT)
        if not severity:
            return DEFAULT_SEVERITY
        if not isinstance(severity, str) or severity.strip().lower() not in SEVERITY_OPTIONS:
            raise ReportValidationError(INVALID_SEVERITY)
        return severity.strip().lower()

    async def submit(
        self,
        description: Any,
        latitude: Any,
        longitude: Any,
        severity: Any = None
    ) -> Report:
        try:
            resolved_severity = self.validate(description, latitude, longitude, severity)
        except ReportValidationError as e:
            logger.info(f"Report rejected: {e.message}")
            raise

        report = Report(
            id=str(uuid.uuid4()),
            description=description.strip(),
            latitude=float(latitude),
            longitude=float(longitude),
            severity=resolved_severity,
            created_at=datetime.now(timezone.utc),
        )
        # Mutation completes before the first await
        self._reports = [report, *self._reports][:self.max_reports]
        logger.info(f"Report {report.id} stored ({report.severity})")

        if self.publisher is not None:
            await self.publisher.broadcast(REPORT_EVENT, report.to_wire())
        return report
