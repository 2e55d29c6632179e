"""
Headless client: keeps a ClientSyncCache in sync with the server through
request/response queries and the Server-Sent Events stream.
"""
import asyncio
import json
import math
from typing import Any, Optional

import httpx

from ..common.exceptions import ReportSubmissionError
from ..common.logging import setup_logger
from ..common.schemas import Prediction, Report, FilterCriteria, DEFAULT_SEVERITY
from .sse import iter_events
from .sync_cache import ClientSyncCache

logger = setup_logger("riesgovial.client")

INVALID_COORDINATES = "Por favor ingresa coordenadas válidas."
MISSING_DESCRIPTION = "La descripción es obligatoria."
SUBMISSION_FAILED = "Error al enviar el reporte"


class RealtimeSession:
    """
    One connected client. Event handlers and query results run to
    completion on the event loop, so the cache is never seen half-updated.
    """

    def __init__(
        self,
        api_url: str,
        cache: Optional[ClientSyncCache] = None,
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.cache = cache or ClientSyncCache()
        self._client = httpx.AsyncClient(
            base_url=api_url,
            timeout=timeout_seconds,
            transport=transport
        )
        self._pending_queries = 0

    @classmethod
    def from_config(cls, cfg) -> "RealtimeSession":
        return cls(
            cfg.api_url,
            cache=ClientSyncCache(max_items=cfg.max_items),
            timeout_seconds=cfg.timeout_seconds,
        )

    @property
    def loading_predictions(self) -> bool:
        return self._pending_queries > 0

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def close(self):
        await self._client.aclose()

    # Request/response

    async def fetch_predictions(self) -> bool:
        """
        Replaces the predictions with a fresh query for the active filter.
        Returns False when the request failed or its result went stale
        because the filter changed while it was in flight.
        """
        criteria = self.cache.filters
        self._pending_queries += 1
        try:
            response = await self._client.get(
                "/api/predictions", params=criteria.to_query_params()
            )
            response.raise_for_status()
            data = response.json().get("data") or []
            predictions = [Prediction.model_validate(item) for item in data]
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            logger.warning(f"Could not fetch predictions: {e!r}")
            return False
        finally:
            self._pending_queries -= 1

        if self.cache.filters != criteria:
            logger.debug(f"Discarding stale predictions for {criteria}")
            return False
        self.cache.replace_predictions(predictions)
        return True

    async def change_filters(self, criteria: FilterCriteria) -> bool:
        self.cache.set_filters(criteria)
        return await self.fetch_predictions()

    async def reset_filters(self) -> bool:
        return await self.change_filters(FilterCriteria())

    async def load_reports(self) -> bool:
        try:
            response = await self._client.get("/api/reports")
            response.raise_for_status()
            data = response.json().get("data") or []
            reports = [Report.model_validate(item) for item in data]
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            logger.warning(f"Could not fetch reports: {e!r}")
            return False
        self.cache.replace_reports(reports)
        return True

    async def submit_report(
        self,
        description: str,
        latitude: Any,
        longitude: Any,
        severity: str = DEFAULT_SEVERITY
    ) -> Report:
        """
        Validates locally, then posts the report. The cache only changes
        once the server has accepted it.
        """
        try:
            latitude = float(latitude)
            longitude = float(longitude)
        except (TypeError, ValueError):
            raise ReportSubmissionError(INVALID_COORDINATES)
        if not (math.isfinite(latitude) and math.isfinite(longitude)):
            raise ReportSubmissionError(INVALID_COORDINATES)
        if not description or not description.strip():
            raise ReportSubmissionError(MISSING_DESCRIPTION)

        try:
            response = await self._client.post("/api/reports", json={
                "description": description,
                "latitude": latitude,
                "longitude": longitude,
                "severity": severity,
            })
        except httpx.HTTPError as e:
            raise ReportSubmissionError(SUBMISSION_FAILED) from e

        if response.status_code != 201:
            raise ReportSubmissionError(self._error_message(response), response.status_code)

        saved = Report.model_validate(response.json())
        self.cache.apply_new_report(saved)
        return saved

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return SUBMISSION_FAILED
        if isinstance(body, dict) and body.get("message"):
            return body["message"]
        return SUBMISSION_FAILED

    # Push channel

    def handle_event(self, event: str, payload: Any):
        """Applies one pushed event to the cache. Malformed events are skipped."""
        try:
            if event == "init":
                reports = [Report.model_validate(item) for item in payload.get("reports") or []]
                predictions = [Prediction.model_validate(item) for item in payload.get("predictions") or []]
                self.cache.apply_init(reports, predictions)
            elif event == "report:new":
                self.cache.apply_new_report(Report.model_validate(payload))
            elif event == "prediction:new":
                self.cache.apply_new_prediction(Prediction.model_validate(payload))
            else:
                logger.debug(f"Ignoring unknown event {event}")
        except (ValueError, AttributeError) as e:
            logger.warning(f"Malformed {event} event: {e!r}")

    async def listen(self):
        """Consumes the event stream until the server closes it."""
        async with self._client.stream(
            "GET",
            "/api/stream",
            headers={"Accept": "text/event-stream"},
            timeout=httpx.Timeout(None),
        ) as response:
            response.raise_for_status()
            async for sse in iter_events(response.aiter_lines()):
                try:
                    payload = json.loads(sse.data)
                except ValueError:
                    logger.warning(f"Non-JSON {sse.event} event skipped")
                    continue
                self.handle_event(sse.event, payload)

    async def listen_forever(self, retry_seconds: float = 5.0):
        """
        Reconnects after stream failures. Events missed while disconnected
        are not replayed; the next init snapshot is merged instead.
        """
        while True:
            try:
                await self.listen()
            except httpx.HTTPError as e:
                logger.warning(f"Stream disconnected: {e!r}")
            await asyncio.sleep(retry_seconds)
