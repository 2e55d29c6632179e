"""
Synthetic prediction generator for the standalone demo mode.
"""
import random
import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from ...common.schemas import Prediction, WEATHER_OPTIONS

DEFAULT_CENTER = (14.6349, -90.5069)

class SyntheticPredictionGenerator:
    """
    Produces random predictions scattered around a map center.
    """

    def __init__(
        self,
        center_latitude: float = DEFAULT_CENTER[0],
        center_longitude: float = DEFAULT_CENTER[1],
        spread_degrees: float = 0.2,
        rng: Optional[random.Random] = None
    ):
        self.center_latitude = center_latitude
        self.center_longitude = center_longitude
        self.spread_degrees = spread_degrees
        self.rng = rng or random.Random()

    def create(self, reference: Optional[datetime] = None, offset_hours: int = 0) -> Prediction:
        """One prediction for reference time + offset_hours (UTC)."""
        reference = reference or datetime.now(timezone.utc)
        moment = reference + timedelta(hours=offset_hours)
        return Prediction(
            id=str(uuid.uuid4()),
            latitude=self.center_latitude + (self.rng.random() - 0.5) * self.spread_degrees,
            longitude=self.center_longitude + (self.rng.random() - 0.5) * self.spread_degrees,
            risk_score=round(self.rng.random() * 50 + 50) / 100,
            date=moment.strftime("%Y-%m-%d"),
            hour=moment.strftime("%H:%M"),
            weather=self.rng.choice(WEATHER_OPTIONS),
            period="dia" if 6 <= moment.hour < 18 else "noche",
            road_segment=f"Segmento {self.rng.randint(1, 20)}",
        )

    def initial_batch(self, size: int, reference: Optional[datetime] = None) -> List[Prediction]:
        """Seed batch: one prediction per hour starting at the reference time."""
        reference = reference or datetime.now(timezone.utc)
        return [self.create(reference, offset) for offset in range(size)]
