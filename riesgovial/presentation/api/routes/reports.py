"""
Endpoints for citizen reports.
"""
from typing import Any
from fastapi import APIRouter, Body, Depends

from ....common.exceptions import ReportValidationError
from ....reports.application.report_store import INCOMPLETE_REPORT
from ..dependencies import Services, get_services

router = APIRouter()

@router.get("/api/reports")
async def list_reports(services: Services = Depends(get_services)):
    """Stored reports, most recent first."""
    return {"data": [report.to_wire() for report in services.store.list()]}

@router.post("/api/reports", status_code=201)
async def create_report(
    payload: Any = Body(None),
    services: Services = Depends(get_services)
):
    """
    Stores a report and broadcasts it as report:new.

    Body example:
    {
        "description": "Choque leve",
        "latitude": 14.63,
        "longitude": -90.50,
        "severity": "alta"
    }
    """
    if not isinstance(payload, dict):
        raise ReportValidationError(INCOMPLETE_REPORT)
    report = await services.store.submit(
        payload.get("description"),
        payload.get("latitude"),
        payload.get("longitude"),
        payload.get("severity"),
    )
    return report.to_wire()
