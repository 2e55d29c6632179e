import pytest
from unittest.mock import MagicMock, AsyncMock
from riesgovial.common.schemas import Prediction, Report, FilterCriteria

@pytest.fixture
def make_prediction():
    def _make(id="p1", date="2024-05-10", hour="14:30", weather="lluvia", period="dia", **kwargs):
        return Prediction(
            id=id,
            latitude=kwargs.pop("latitude", 14.63),
            longitude=kwargs.pop("longitude", -90.50),
            risk_score=kwargs.pop("risk_score", 0.6),
            date=date,
            hour=hour,
            weather=weather,
            period=period,
            road_segment=kwargs.pop("road_segment", "Segmento 3"),
        )
    return _make

@pytest.fixture
def make_report():
    def _make(id="r1", description="Choque leve", severity="media"):
        return Report(
            id=id,
            description=description,
            latitude=14.63,
            longitude=-90.50,
            severity=severity,
            created_at="2024-05-10T14:30:00Z",
        )
    return _make

@pytest.fixture
def mock_publisher():
    publisher = MagicMock()
    publisher.broadcast = AsyncMock()
    return publisher

@pytest.fixture
def no_filters():
    return FilterCriteria()
