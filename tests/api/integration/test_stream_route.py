import json
import pytest
from sse_starlette import ServerSentEvent as WireEvent
from riesgovial.client.sse import iter_events
from riesgovial.predictions.application.feeds import SyntheticPredictionFeed
from riesgovial.presentation.api import create_app
from riesgovial.presentation.api.dependencies import Services
from riesgovial.presentation.api.routes.streaming import stream_events
from riesgovial.realtime.broadcast.realtime_broadcaster import RealtimeBroadcaster
from riesgovial.reports.application.report_store import ReportStore

async def decode(item):
    """Renders one yielded item as SSE text and reads it back."""
    text = WireEvent(event=item["event"], data=item["data"]).encode().decode()

    async def lines():
        for line in text.split("\n"):
            yield line

    return [event async for event in iter_events(lines())]

@pytest.fixture
def broadcaster():
    return RealtimeBroadcaster()

@pytest.fixture
def services(broadcaster):
    store = ReportStore(broadcaster)
    feed = SyntheticPredictionFeed(broadcaster, initial_size=5, snapshot_size=3)
    return Services(store=store, feed=feed, broadcaster=broadcaster, ping_seconds=15)

def test_stream_route_registered():
    app = create_app(broadcaster=RealtimeBroadcaster())
    assert "/api/stream" in [route.path for route in app.routes]

@pytest.mark.asyncio
async def test_stream_sends_init_first_and_unsubscribes_on_close(services, broadcaster):
    await services.store.submit("Choque en la avenida", 14.6, -90.5, "alta")

    response = await stream_events(services=services)
    assert response.media_type == "text/event-stream"
    assert broadcaster.subscriber_count == 1

    events = response.body_iterator
    first = await events.__anext__()
    [init] = await decode(first)
    assert init.event == "init"
    data = json.loads(init.data)
    assert data["reports"][0]["description"] == "Choque en la avenida"
    assert "createdAt" in data["reports"][0]
    assert [p["id"] for p in data["predictions"]] == [p.id for p in reversed(services.feed.predictions[-3:])]
    assert {"riskScore", "roadSegment"} <= set(data["predictions"][0])

    report = await services.store.submit("Semáforo apagado", 14.61, -90.51)
    second = await events.__anext__()
    [pushed] = await decode(second)
    assert pushed.event == "report:new"
    assert json.loads(pushed.data)["id"] == report.id

    await events.aclose()
    assert broadcaster.subscriber_count == 0

@pytest.mark.asyncio
async def test_stream_delivers_ticked_prediction(services, broadcaster):
    response = await stream_events(services=services)
    events = response.body_iterator
    await events.__anext__()

    prediction = await services.feed.tick()
    [pushed] = await decode(await events.__anext__())
    assert pushed.event == "prediction:new"
    assert json.loads(pushed.data)["id"] == prediction.id

    await events.aclose()
    assert broadcaster.subscriber_count == 0
