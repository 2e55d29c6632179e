import pytest
import asyncio
from riesgovial.realtime.broadcast.realtime_broadcaster import RealtimeBroadcaster, INIT_EVENT

@pytest.fixture
def broadcaster():
    return RealtimeBroadcaster()

@pytest.mark.asyncio
async def test_subscribe_unsubscribe(broadcaster):
    queue = await broadcaster.subscribe()
    assert isinstance(queue, asyncio.Queue)
    assert queue in broadcaster._subscribers
    assert broadcaster.subscriber_count == 1
    
    await broadcaster.unsubscribe(queue)
    assert broadcaster.subscriber_count == 0

@pytest.mark.asyncio
async def test_broadcast_reaches_every_subscriber(broadcaster):
    q1 = await broadcaster.subscribe()
    q2 = await broadcaster.subscribe()
    
    await broadcaster.broadcast("report:new", {"id": "r1"})
    
    expected = {"event": "report:new", "data": {"id": "r1"}}
    assert await q1.get() == expected
    assert await q2.get() == expected

@pytest.mark.asyncio
async def test_init_is_first_and_only_for_the_subscriber(broadcaster):
    existing = await broadcaster.subscribe()
    snapshot = {"reports": [], "predictions": []}
    queue = await broadcaster.subscribe(initial=snapshot)
    await broadcaster.broadcast("prediction:new", {"id": "p1"})

    assert await queue.get() == {"event": INIT_EVENT, "data": snapshot}
    assert (await queue.get())["event"] == "prediction:new"
    assert (await existing.get())["event"] == "prediction:new"
    assert existing.empty()

@pytest.mark.asyncio
async def test_broadcast_slow_consumer(broadcaster):
    q1 = await broadcaster.subscribe(queue_size=1)
    fast = await broadcaster.subscribe()
    
    await broadcaster.broadcast("report:new", {"msg": 1})
    await broadcaster.broadcast("report:new", {"msg": 2}) # Dropped for q1
    
    assert (await q1.get())["data"] == {"msg": 1}
    assert q1.empty()
    assert fast.qsize() == 2

@pytest.mark.asyncio
async def test_late_subscriber_misses_past_events(broadcaster):
    await broadcaster.broadcast("report:new", {"id": "r1"})
    queue = await broadcaster.subscribe()
    assert queue.empty()

@pytest.mark.asyncio
async def test_unsubscribed_queue_receives_nothing(broadcaster):
    queue = await broadcaster.subscribe()
    await broadcaster.unsubscribe(queue)
    await broadcaster.broadcast("report:new", {"id": "r1"})
    assert queue.empty()
