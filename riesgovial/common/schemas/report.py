from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict

SEVERITY_OPTIONS = ("alta", "media", "baja")
DEFAULT_SEVERITY = "media"

class Report(BaseModel):
    """
    Citizen-submitted incident report. Server-authoritative, mirrored by clients.
    """
    id: str = Field(..., description="Server-assigned identifier")
    description: str = Field(..., min_length=1, description="Trimmed incident description")
    latitude: float = Field(..., description="Latitude")
    longitude: float = Field(..., description="Longitude")
    severity: str = Field(DEFAULT_SEVERITY, description="alta, media or baja")
    created_at: datetime = Field(..., alias="createdAt", description="Server-assigned creation time (UTC)")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
