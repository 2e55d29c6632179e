import math
import pytest
from riesgovial.common.exceptions import ReportValidationError
from riesgovial.reports.application.report_store import (
    ReportStore,
    REPORT_EVENT,
    INCOMPLETE_REPORT,
)

@pytest.fixture
def store(mock_publisher):
    return ReportStore(mock_publisher, max_reports=50)

@pytest.mark.asyncio
async def test_submit_stores_first_and_broadcasts(store, mock_publisher):
    report = await store.submit("  Choque leve ", 14.63, -90.50, "alta")

    assert report.id
    assert report.description == "Choque leve"
    assert report.severity == "alta"
    assert report.created_at.tzinfo is not None
    assert store.list()[0] == report
    mock_publisher.broadcast.assert_awaited_once_with(REPORT_EVENT, report.to_wire())

@pytest.mark.asyncio
async def test_severity_defaults_to_media(store):
    report = await store.submit("Bache", 14.6, -90.5)
    assert report.severity == "media"

@pytest.mark.asyncio
async def test_severity_is_normalized(store):
    report = await store.submit("Bache", 14.6, -90.5, " BAJA ")
    assert report.severity == "baja"

@pytest.mark.asyncio
@pytest.mark.parametrize("description,latitude,longitude", [
    ("Choque", "abc", -90.5),
    ("Choque", 14.6, None),
    ("Choque", "14.6", -90.5),
    ("Choque", True, -90.5),
    ("Choque", math.nan, -90.5),
    ("Choque", 14.6, math.inf),
    ("", 14.6, -90.5),
    ("   ", 14.6, -90.5),
    (None, 14.6, -90.5),
])
async def test_invalid_reports_are_rejected(store, mock_publisher, description, latitude, longitude):
    with pytest.raises(ReportValidationError) as exc_info:
        await store.submit(description, latitude, longitude)
    assert exc_info.value.message == INCOMPLETE_REPORT
    assert exc_info.value.status_code == 400
    assert store.list() == []
    mock_publisher.broadcast.assert_not_awaited()

@pytest.mark.asyncio
async def test_unknown_severity_rejected(store, mock_publisher):
    with pytest.raises(ReportValidationError):
        await store.submit("Choque", 14.6, -90.5, "catastrofica")
    assert len(store) == 0
    mock_publisher.broadcast.assert_not_awaited()

@pytest.mark.asyncio
async def test_retention_keeps_most_recent(mock_publisher):
    store = ReportStore(mock_publisher, max_reports=3)
    created = [await store.submit(f"Reporte {i}", 14.6, -90.5) for i in range(5)]

    assert len(store) == 3
    assert [r.description for r in store.list()] == ["Reporte 4", "Reporte 3", "Reporte 2"]
    assert created[0] not in store.list()

@pytest.mark.asyncio
async def test_default_bound_is_fifty(store):
    for i in range(60):
        await store.submit(f"Reporte {i}", 14.6, -90.5)
    assert len(store) == 50
    assert store.list()[0].description == "Reporte 59"

@pytest.mark.asyncio
async def test_list_returns_copy(store):
    await store.submit("Choque", 14.6, -90.5)
    snapshot = store.list()
    snapshot.clear()
    assert len(store) == 1

@pytest.mark.asyncio
async def test_integer_coordinates_accepted(store):
    report = await store.submit("Choque", 14, -90)
    assert report.latitude == 14.0
