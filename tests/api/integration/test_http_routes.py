import asyncio
import httpx
import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock, AsyncMock
from riesgovial.common.exceptions import UpstreamStatusError
from riesgovial.client.session import RealtimeSession
from riesgovial.common.schemas import FilterCriteria
from riesgovial.predictions.domain.filters import matches_filters
from riesgovial.presentation.api import create_app
from riesgovial.realtime.broadcast.realtime_broadcaster import RealtimeBroadcaster
from riesgovial.reports.application.report_store import ReportStore

@pytest.fixture
def broadcaster():
    return RealtimeBroadcaster()

@pytest.fixture
def listener(broadcaster):
    # Registered directly: TestClient runs the app on its own loop
    queue = asyncio.Queue()
    broadcaster._subscribers.add(queue)
    return queue

@pytest.fixture
def feed(make_prediction):
    feed = MagicMock()
    feed.mode = "synthetic"
    predictions = [
        make_prediction(id="a", weather="lluvia", period="dia"),
        make_prediction(id="b", weather="no_lluvia", period="dia"),
        make_prediction(id="c", weather="lluvia", period="noche"),
    ]

    async def query(criteria):
        return [p for p in predictions if matches_filters(p, criteria)]

    feed.query = AsyncMock(side_effect=query)
    feed.snapshot = AsyncMock(return_value=predictions)
    feed.start = AsyncMock()
    feed.stop = AsyncMock()
    return feed

@pytest.fixture
def app(broadcaster, feed):
    return create_app(feed=feed, broadcaster=broadcaster)

@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)

def test_predictions_filtered_by_weather_and_period(client):
    response = client.get("/api/predictions", params={"weather": "lluvia", "period": "dia"})
    assert response.status_code == 200
    assert [p["id"] for p in response.json()["data"]] == ["a"]

def test_predictions_todos_removes_weather_constraint(client):
    response = client.get("/api/predictions", params={"weather": "todos", "period": "dia"})
    assert [p["id"] for p in response.json()["data"]] == ["a", "b"]

def test_predictions_wire_format(client):
    prediction = client.get("/api/predictions").json()["data"][0]
    assert set(prediction) == {
        "id", "latitude", "longitude", "riskScore", "date",
        "hour", "weather", "period", "roadSegment",
    }

def test_create_report_scenario(client, listener):
    payload = {"description": " Choque leve ", "latitude": 14.63, "longitude": -90.50, "severity": "alta"}
    response = client.post("/api/reports", json=payload)

    assert response.status_code == 201
    created = response.json()
    assert created["id"]
    assert created["description"] == "Choque leve"
    assert created["severity"] == "alta"
    assert "createdAt" in created

    listed = client.get("/api/reports").json()["data"]
    assert listed[0] == created

    message = listener.get_nowait()
    assert message == {"event": "report:new", "data": created}

def test_create_report_invalid_latitude(client, listener):
    response = client.post("/api/reports", json={"description": "Choque", "latitude": "abc", "longitude": -90.5})
    assert response.status_code == 400
    assert response.json() == {"message": "Datos del reporte incompletos."}
    assert client.get("/api/reports").json()["data"] == []
    assert listener.empty()

@pytest.mark.parametrize("body", [b"not json", b"[1, 2]", b""])
def test_create_report_malformed_body(client, body):
    response = client.post("/api/reports", content=body, headers={"content-type": "application/json"})
    assert response.status_code == 400
    assert "message" in response.json()

def test_upstream_error_surfaces_message_and_status(client, feed):
    feed.query.side_effect = UpstreamStatusError("ArcGIS devolvió un error al solicitar predicciones.", status_code=404)
    response = client.get("/api/predictions")
    assert response.status_code == 404
    assert response.json() == {"message": "ArcGIS devolvió un error al solicitar predicciones."}

def test_unexpected_error_is_generic_500(client, feed):
    feed.query.side_effect = RuntimeError("secret internals")
    response = client.get("/api/predictions")
    assert response.status_code == 500
    assert response.json() == {"message": "Error interno del servidor."}

def test_status(client):
    response = client.get("/status")
    assert response.status_code == 200
    assert response.json()["feed_mode"] == "synthetic"
    assert response.json()["reports"] == 0

def test_lifespan_starts_and_stops_feed(app, feed):
    with TestClient(app):
        feed.start.assert_awaited_once()
    feed.stop.assert_awaited_once()

def test_default_app_uses_synthetic_feed():
    app = create_app()
    services = app.state.services
    assert services.feed.mode == "synthetic"
    assert isinstance(services.store, ReportStore)
    assert services.store.max_reports == 50

@pytest.mark.asyncio
async def test_client_session_against_app(app, broadcaster):
    session = RealtimeSession("http://riesgovial.test", transport=httpx.ASGITransport(app=app))
    queue = await broadcaster.subscribe()

    await session.change_filters(FilterCriteria(period="noche"))
    assert [p.id for p in session.cache.predictions] == ["c"]

    saved = await session.submit_report("Choque leve", 14.63, -90.50, "alta")
    assert session.cache.reports[0].id == saved.id

    message = await queue.get()
    session.handle_event(message["event"], message["data"])
    assert [r.id for r in session.cache.reports] == [saved.id]
    await session.close()
