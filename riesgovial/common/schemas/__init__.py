from .prediction import Prediction, WEATHER_OPTIONS, PERIOD_OPTIONS, UNKNOWN, UNKNOWN_SEGMENT
from .report import Report, SEVERITY_OPTIONS, DEFAULT_SEVERITY
from .filters import FilterCriteria, ALL

__all__ = [
    "Prediction",
    "Report",
    "FilterCriteria",
    "WEATHER_OPTIONS",
    "PERIOD_OPTIONS",
    "SEVERITY_OPTIONS",
    "DEFAULT_SEVERITY",
    "UNKNOWN",
    "UNKNOWN_SEGMENT",
    "ALL",
]
