from typing import Dict, Optional
from pydantic import BaseModel, Field, ConfigDict

ALL = "todos"

class FilterCriteria(BaseModel):
    """
    Optional constraints narrowing which predictions are relevant.
    Value object: compared by field equality.
    """
    date: Optional[str] = Field(None, description="Exact date (YYYY-MM-DD)")
    hour: Optional[str] = Field(None, description="Time of day; only the hour component is compared")
    weather: Optional[str] = Field(ALL, description="lluvia, no_lluvia or todos")
    period: Optional[str] = Field(ALL, description="dia, noche or todos")

    model_config = ConfigDict(frozen=True)

    def to_query_params(self) -> Dict[str, str]:
        """Query-string entries, omitting empty values and the 'todos' sentinel."""
        params = {}
        for key in ("date", "hour", "weather", "period"):
            value = getattr(self, key)
            if value and value != ALL:
                params[key] = value
        return params
