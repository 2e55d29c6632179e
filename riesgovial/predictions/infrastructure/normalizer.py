"""
Maps heterogeneous feature-service records onto the canonical Prediction.
Never raises on missing or malformed input: each field degrades to its default.
"""
import math
import unicodedata
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ...common.logging import setup_logger, log_execution_time
from ...common.schemas import Prediction, UNKNOWN, UNKNOWN_SEGMENT

logger = setup_logger("riesgovial.predictions.normalizer")

# Alternate spellings, in priority order
ID_KEYS = ("id", "ID", "objectId", "OBJECTID", "guid", "GUID")
LATITUDE_KEYS = ("latitude", "Latitude", "LATITUDE")
LONGITUDE_KEYS = ("longitude", "Longitude", "LONGITUDE")
GEOMETRY_LATITUDE_KEYS = ("y", "latitude", "Latitude")
GEOMETRY_LONGITUDE_KEYS = ("x", "longitude", "Longitude")
RISK_KEYS = ("riskScore", "RISK_SCORE", "risk_score", "risk", "RISK")
DATE_KEYS = ("date", "DATE", "predictionDate", "prediction_date", "PredictionDate")
HOUR_KEYS = ("hour", "HOUR", "predictionHour", "PredictionHour")
WEATHER_KEYS = ("weather", "WEATHER", "climate", "CLIMATE")
PERIOD_KEYS = ("period", "PERIOD", "timePeriod", "TIMEPERIOD")
SEGMENT_KEYS = ("roadSegment", "ROAD_SEGMENT", "segment", "SEGMENT", "road_segment", "via", "VIA")


def extract_attribute(attributes: Dict[str, Any], keys: Sequence[str]) -> Any:
    """First present, non-null, non-empty value among the candidate keys."""
    for key in keys:
        value = attributes.get(key)
        if value is not None and value != "":
            return value
    return None


def parse_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return None if math.isnan(value) else float(value)
    if isinstance(value, str) and value.strip():
        try:
            parsed = float(value)
        except ValueError:
            return None
        return None if math.isnan(parsed) else parsed
    return None


def normalize_string(value: Any) -> Optional[str]:
    if value is None:
        return None
    return unicodedata.normalize("NFKC", str(value)).strip()


def normalize_enum(value: Any) -> Optional[str]:
    normalized = normalize_string(value)
    return normalized.lower() if normalized is not None else None


def normalize_risk(value: Any) -> float:
    """
    Percentages (> 1) are divided by 100 and capped at 1; negatives floor at 0;
    unparseable values default to 0.
    """
    parsed = parse_number(value)
    if parsed is None:
        return 0.0
    if parsed > 1:
        return min(parsed / 100, 1.0)
    if parsed < 0:
        return 0.0
    return parsed


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def normalize_feature(feature: Any, fallback_id: str) -> Prediction:
    """
    Converts one raw record (attribute bag plus optional geometry bag, or a
    flat attribute bag) into a Prediction.
    """
    feature = _as_dict(feature)
    attributes = feature.get("attributes")
    attributes = _as_dict(attributes if attributes is not None else feature)
    geometry = _as_dict(feature.get("geometry"))

    record_id = extract_attribute(attributes, ID_KEYS)

    latitude = parse_number(extract_attribute(attributes, LATITUDE_KEYS))
    if latitude is None:
        latitude = parse_number(extract_attribute(geometry, GEOMETRY_LATITUDE_KEYS))

    longitude = parse_number(extract_attribute(attributes, LONGITUDE_KEYS))
    if longitude is None:
        longitude = parse_number(extract_attribute(geometry, GEOMETRY_LONGITUDE_KEYS))

    date = normalize_string(extract_attribute(attributes, DATE_KEYS))
    hour = normalize_string(extract_attribute(attributes, HOUR_KEYS))
    weather = normalize_enum(extract_attribute(attributes, WEATHER_KEYS))
    period = normalize_enum(extract_attribute(attributes, PERIOD_KEYS))
    segment = normalize_string(extract_attribute(attributes, SEGMENT_KEYS))

    return Prediction(
        id=str(record_id if record_id is not None else fallback_id),
        latitude=latitude,
        longitude=longitude,
        risk_score=normalize_risk(extract_attribute(attributes, RISK_KEYS)),
        date=date or "",
        hour=hour or "",
        weather=weather or UNKNOWN,
        period=period or UNKNOWN,
        road_segment=segment or UNKNOWN_SEGMENT,
    )


@log_execution_time(logger)
def normalize_features(features: Iterable[Any], id_prefix: str = "arcgis") -> List[Prediction]:
    """Normalizes a batch; records without an id get '<prefix>-<index>'."""
    return [
        normalize_feature(feature, f"{id_prefix}-{index}")
        for index, feature in enumerate(features)
    ]
