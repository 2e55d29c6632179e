"""
Endpoints for filtered prediction queries.
"""
from typing import Optional
from fastapi import APIRouter, Depends

from ....common.schemas import FilterCriteria, ALL
from ..dependencies import Services, get_services

router = APIRouter()

@router.get("/api/predictions")
async def list_predictions(
    date: Optional[str] = None,
    hour: Optional[str] = None,
    weather: Optional[str] = ALL,
    period: Optional[str] = ALL,
    services: Services = Depends(get_services)
):
    """
    Predictions matching the filters.
    Example: /api/predictions?weather=lluvia&period=dia
    """
    criteria = FilterCriteria(date=date, hour=hour, weather=weather, period=period)
    predictions = await services.feed.query(criteria)
    return {"data": [prediction.to_wire() for prediction in predictions]}
