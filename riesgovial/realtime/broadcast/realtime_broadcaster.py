import asyncio
from typing import Optional, Set

from ...common.logging import setup_logger

logger = setup_logger("riesgovial.realtime.broadcaster")

INIT_EVENT = "init"

class RealtimeBroadcaster:
    """
    Pub/sub system to push events to every connected client.
    Delivery is at-most-once with no replay: a slow client whose queue is
    full misses the event.
    """
    
    def __init__(self, queue_size: int = 50):
        self.queue_size = queue_size
        self._subscribers: Set[asyncio.Queue] = set()
        self._lock = asyncio.Lock()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    @staticmethod
    def message(event: str, payload: dict) -> dict:
        return {"event": event, "data": payload}

    async def subscribe(self, initial: Optional[dict] = None, queue_size: Optional[int] = None) -> asyncio.Queue:
        """
        Subscribes a client to every future broadcast.
        If given, the init payload is queued before the subscription is
        registered, so it is always the first event the client receives.
        """
        queue = asyncio.Queue(maxsize=queue_size or self.queue_size)
        if initial is not None:
            queue.put_nowait(self.message(INIT_EVENT, initial))
        
        async with self._lock:
            self._subscribers.add(queue)
        
        return queue

    async def unsubscribe(self, queue: asyncio.Queue):
        """Removes a subscriber."""
        async with self._lock:
            self._subscribers.discard(queue)

    async def broadcast(self, event: str, payload: dict):
        """
        Transmits an event to all subscribers.
        Non-blocking: if a client is slow, it is skipped.
        """
        async with self._lock:
            subscribers = self._subscribers.copy()
        
        message = self.message(event, payload)
        for queue in subscribers:
            try:
                queue.put_nowait(message)
            except asyncio.QueueFull:
                logger.warning(f"Skipping slow client for {event}")
