"""
Domain protocols for the prediction feed.
"""
from typing import List, Protocol
from ...common.schemas import Prediction, FilterCriteria

class PredictionFeed(Protocol):
    """
    Source of predictions, either a server-held working set or a proxied
    external service. Both expose the same contract.
    """
    mode: str

    async def query(self, criteria: FilterCriteria) -> List[Prediction]:
        """Predictions matching the criteria."""
        ...

    async def snapshot(self) -> List[Prediction]:
        """Recent predictions for a connecting client's init event."""
        ...

    async def start(self):
        ...

    async def stop(self):
        ...

class EventPublisher(Protocol):
    """
    Fan-out sink for realtime events.
    """
    async def broadcast(self, event: str, payload: dict):
        ...
