"""
Prediction feeds: a synthetic server-held working set, or a proxy over the
external feature service. Both expose query() and snapshot().
"""
import asyncio
from collections import deque
from typing import Deque, List, Optional

from ...common.exceptions import UpstreamError
from ...common.logging import setup_logger
from ...common.schemas import Prediction, FilterCriteria
from ..domain.filters import matches_filters
from ..domain.protocols import EventPublisher
from ..infrastructure.arcgis_client import ArcgisClient
from ..infrastructure.generator import SyntheticPredictionGenerator

logger = setup_logger("riesgovial.predictions.feeds")

PREDICTION_EVENT = "prediction:new"


class SyntheticPredictionFeed:
    """
    Bounded in-memory working set (oldest evicted first), seeded at startup
    and extended by one generated prediction per tick. Each tick is
    broadcast; queries never broadcast.
    """
    mode = "synthetic"

    def __init__(
        self,
        publisher: EventPublisher,
        generator: Optional[SyntheticPredictionGenerator] = None,
        initial_size: int = 15,
        max_predictions: int = 200,
        snapshot_size: int = 30,
        interval_seconds: float = 60.0,
        max_offset_hours: int = 5
    ):
        self.publisher = publisher
        self.generator = generator or SyntheticPredictionGenerator()
        self.snapshot_size = snapshot_size
        self.interval_seconds = interval_seconds
        self.max_offset_hours = max_offset_hours
        self._predictions: Deque[Prediction] = deque(
            self.generator.initial_batch(initial_size),
            maxlen=max_predictions
        )
        self._task: Optional[asyncio.Task] = None

    @classmethod
    def from_config(cls, cfg, publisher: EventPublisher) -> "SyntheticPredictionFeed":
        generator = SyntheticPredictionGenerator(
            center_latitude=cfg.center_latitude,
            center_longitude=cfg.center_longitude,
            spread_degrees=cfg.spread_degrees,
        )
        return cls(
            publisher,
            generator=generator,
            initial_size=cfg.initial_size,
            max_predictions=cfg.max_predictions,
            snapshot_size=cfg.snapshot_size,
            interval_seconds=cfg.interval_seconds,
            max_offset_hours=cfg.max_offset_hours,
        )

    @property
    def predictions(self) -> List[Prediction]:
        """Working set, oldest first."""
        return list(self._predictions)

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def query(self, criteria: FilterCriteria) -> List[Prediction]:
        """Matching predictions, newest first."""
        return [p for p in reversed(self._predictions) if matches_filters(p, criteria)]

    async def snapshot(self) -> List[Prediction]:
        """The snapshot_size most recent predictions, newest first."""
        if self.snapshot_size <= 0:
            return []
        return list(self._predictions)[-self.snapshot_size:][::-1]

    async def tick(self) -> Prediction:
        """Appends one generated prediction and broadcasts it."""
        # Offsets 0..max_offset_hours-1
        offset = self.generator.rng.randrange(self.max_offset_hours) if self.max_offset_hours > 0 else 0
        prediction = self.generator.create(offset_hours=offset)
        self._predictions.append(prediction)
        await self.publisher.broadcast(PREDICTION_EVENT, prediction.to_wire())
        return prediction

    async def start(self):
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info(f"Synthetic feed started (every {self.interval_seconds}s)")

    async def _run(self):
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self.tick()
            except Exception:
                logger.exception("Synthetic tick failed")

    async def stop(self):
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Synthetic feed stopped")


class ArcgisPredictionFeed:
    """
    Proxies queries to the feature service. With broadcast_on_query, every
    fetched prediction is also re-broadcast as a prediction:new event.
    """
    mode = "arcgis"

    def __init__(
        self,
        client: ArcgisClient,
        publisher: EventPublisher,
        broadcast_on_query: bool = True
    ):
        self.client = client
        self.publisher = publisher
        self.broadcast_on_query = broadcast_on_query

    @classmethod
    def from_config(cls, cfg, publisher: EventPublisher) -> "ArcgisPredictionFeed":
        return cls(
            ArcgisClient.from_config(cfg),
            publisher,
            broadcast_on_query=cfg.broadcast_on_query,
        )

    async def query(self, criteria: FilterCriteria) -> List[Prediction]:
        predictions = await self.client.fetch_predictions(criteria.model_dump())
        if self.broadcast_on_query:
            for prediction in predictions:
                await self.publisher.broadcast(PREDICTION_EVENT, prediction.to_wire())
        return predictions

    async def snapshot(self) -> List[Prediction]:
        """Fresh unfiltered fetch; failures degrade to an empty list."""
        try:
            return await self.client.fetch_predictions({})
        except UpstreamError as e:
            logger.warning(f"Init snapshot without predictions: {e.message}")
            return []
        except Exception:
            logger.exception("Init snapshot fetch failed")
            return []

    async def start(self):
        pass

    async def stop(self):
        pass


def build_feed(cfg, publisher: EventPublisher):
    """Creates the feed for the configured mode (feed section of AppConfig)."""
    if cfg.mode == "arcgis":
        return ArcgisPredictionFeed.from_config(cfg.arcgis, publisher)
    return SyntheticPredictionFeed.from_config(cfg.synthetic, publisher)
