"""
Headless client: mirrors the live feed and logs the synchronized cache.

Usage:
    python scripts/run_client.py client.api_url=http://localhost:4000
"""
import asyncio
import os
import sys
import hydra
from omegaconf import DictConfig

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from riesgovial.client import RealtimeSession, risk_band
from riesgovial.common.config import ConfigManager
from riesgovial.common.logging import setup_logger

logger = setup_logger("riesgovial.client.cli")

async def report_cache(session: RealtimeSession, every_seconds: float = 30.0):
    while True:
        await asyncio.sleep(every_seconds)
        cache = session.cache
        bands = {"high": 0, "medium": 0, "low": 0}
        for prediction in cache.predictions:
            bands[risk_band(prediction.risk_score)] += 1
        logger.info(
            f"{len(cache.reports)} reports, {len(cache.predictions)} predictions "
            f"({len(cache.map_predictions())} on map) risk={bands}"
        )

async def run(cfg: DictConfig):
    async with RealtimeSession.from_config(cfg.client) as session:
        await session.load_reports()
        await session.fetch_predictions()
        await asyncio.gather(
            session.listen_forever(),
            report_cache(session),
        )

@hydra.main(version_base=None, config_path="../conf", config_name="config")
def main(cfg: DictConfig):
    cfg = ConfigManager().merge(cfg)
    try:
        asyncio.run(run(cfg))
    except KeyboardInterrupt:
        logger.info("Client stopped")

if __name__ == "__main__":
    main()
