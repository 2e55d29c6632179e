"""
Filter predicate shared by the request/response path and the live event path.
"""
import re
from typing import Optional

from ...common.schemas import Prediction, FilterCriteria, ALL

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

def hour_component(value: Optional[str]) -> Optional[int]:
    """
    Integer hour of a time string ("14:35" -> 14). Minutes and seconds are
    ignored. Returns None when no leading integer can be read.
    """
    if value is None:
        return None
    match = _LEADING_INT.match(str(value).split(":")[0])
    if not match:
        return None
    return int(match.group(1))

def matches_filters(prediction: Optional[Prediction], criteria: FilterCriteria) -> bool:
    """
    Conjunctive match of a prediction against filter criteria.
    Depends only on the prediction's date/hour/weather/period and the criteria.
    """
    if prediction is None:
        return False
    if criteria.date and prediction.date != criteria.date:
        return False
    if criteria.hour:
        selected = hour_component(criteria.hour)
        # An unreadable hour on either side never matches
        if selected is None or hour_component(prediction.hour) != selected:
            return False
    if criteria.weather and criteria.weather != ALL and prediction.weather != criteria.weather:
        return False
    if criteria.period and criteria.period != ALL and prediction.period != criteria.period:
        return False
    return True
