"""
Endpoints for realtime streaming.
"""
import json
from fastapi import APIRouter, Depends
from sse_starlette.sse import EventSourceResponse

from ....realtime.snapshot import build_snapshot
from ..dependencies import Services, get_services

router = APIRouter()

@router.get("/api/stream")
async def stream_events(services: Services = Depends(get_services)):
    """
    Server-Sent Events endpoint.
    First event is `init` ({reports, predictions}), then `report:new` and
    `prediction:new` as they happen.

    Frontend usage:
    ```javascript
    const source = new EventSource('/api/stream');
    source.addEventListener('report:new', (event) => {
        const report = JSON.parse(event.data);
    });
    ```
    """
    broadcaster = services.broadcaster
    snapshot = await build_snapshot(services.store, services.feed)
    queue = await broadcaster.subscribe(initial=snapshot)
    
    async def event_generator():
        try:
            while True:
                message = await queue.get()
                yield {
                    "event": message["event"],
                    "data": json.dumps(message["data"])
                }
        finally:
            await broadcaster.unsubscribe(queue)
    
    return EventSourceResponse(event_generator(), ping=services.ping_seconds)

@router.get("/status")
async def status(services: Services = Depends(get_services)):
    """Service status."""
    return {
        "status": "running",
        "feed_mode": services.feed.mode,
        "subscribers": services.broadcaster.subscriber_count,
        "reports": len(services.store),
    }
