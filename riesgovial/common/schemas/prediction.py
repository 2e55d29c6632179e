from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

WEATHER_OPTIONS = ("lluvia", "no_lluvia")
PERIOD_OPTIONS = ("dia", "noche")
UNKNOWN = "desconocido"
UNKNOWN_SEGMENT = "Segmento desconocido"

class Prediction(BaseModel):
    """
    Accident-risk estimate for a road segment at a given date/hour/weather/period.
    Immutable once created; never persisted.
    """
    id: str = Field(..., description="Opaque identifier, stable for the record's lifetime")
    latitude: Optional[float] = Field(None, description="Latitude (may be absent from external sources)")
    longitude: Optional[float] = Field(None, description="Longitude (may be absent from external sources)")
    risk_score: float = Field(0.0, ge=0.0, le=1.0, alias="riskScore", description="Normalized risk (0.0 - 1.0)")
    date: str = Field("", description="Calendar date (YYYY-MM-DD)")
    hour: str = Field("", description="Time of day (HH:MM)")
    weather: str = Field(UNKNOWN, description="lluvia, no_lluvia or desconocido")
    period: str = Field(UNKNOWN, description="dia, noche or desconocido")
    road_segment: str = Field(UNKNOWN_SEGMENT, alias="roadSegment", description="Road segment label")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def has_coordinates(self) -> bool:
        """True when the prediction can be placed on the map."""
        return self.latitude is not None and self.longitude is not None

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
