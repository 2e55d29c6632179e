"""
Client for the external ArcGIS feature service that publishes predictions.
"""
from typing import Dict, List, Optional
import httpx

from ...common.exceptions import (
    UpstreamConfigError,
    UpstreamNetworkError,
    UpstreamStatusError,
    UpstreamPayloadError,
)
from ...common.logging import setup_logger
from ...common.schemas import Prediction, ALL
from .normalizer import normalize_features

logger = setup_logger("riesgovial.predictions.arcgis")

RECORD_KEYS = ("features", "data", "results")

class ArcgisClient:
    """
    Fetches prediction records and normalizes them.
    Every failure is raised as a classified UpstreamError.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        token: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.url = url
        self.token = token
        self.username = username
        self.password = password
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    @classmethod
    def from_config(cls, cfg) -> "ArcgisClient":
        return cls(
            url=cfg.url,
            token=cfg.token,
            username=cfg.username,
            password=cfg.password,
            timeout_seconds=cfg.timeout_seconds,
        )

    def build_params(self, filters: Optional[Dict[str, Optional[str]]] = None) -> Dict[str, str]:
        """Filter entries with an empty or 'todos' value are omitted."""
        if not self.url:
            raise UpstreamConfigError("El endpoint de ArcGIS no está configurado.")
        return {
            key: value
            for key, value in (filters or {}).items()
            if value and value != ALL
        }

    def build_headers(self) -> Dict[str, str]:
        return {"Accept": "application/json"}

    def build_auth(self) -> Optional[httpx.Auth]:
        # Bearer token takes precedence over basic credentials
        if self.token:
            return _BearerAuth(self.token)
        if self.username and self.password:
            return httpx.BasicAuth(self.username, self.password)
        return None

    async def fetch_predictions(self, filters: Optional[Dict[str, Optional[str]]] = None) -> List[Prediction]:
        params = self.build_params(filters)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self._transport,
                follow_redirects=True
            ) as client:
                response = await client.get(
                    self.url,
                    params=params,
                    headers=self.build_headers(),
                    auth=self.build_auth()
                )
        except httpx.HTTPError as e:
            logger.warning(f"ArcGIS unreachable: {e!r}")
            raise UpstreamNetworkError("No se pudo conectar con ArcGIS.") from e

        if not response.is_success:
            raise UpstreamStatusError(
                "ArcGIS devolvió un error al solicitar predicciones.",
                status_code=response.status_code
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamPayloadError("La respuesta de ArcGIS no es un JSON válido.") from e

        if not isinstance(payload, dict):
            raise UpstreamPayloadError("El formato de la respuesta de ArcGIS es inesperado.")

        error = payload.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else None
            raise UpstreamPayloadError(message or "ArcGIS reportó un error interno.")

        features = []
        for key in RECORD_KEYS:
            if payload.get(key) is not None:
                features = payload[key]
                break
        if not isinstance(features, list):
            raise UpstreamPayloadError("El formato de la respuesta de ArcGIS es inesperado.")

        return normalize_features(features, id_prefix="arcgis")


class _BearerAuth(httpx.Auth):
    def __init__(self, token: str):
        self.token = token

    def auth_flow(self, request: httpx.Request):
        request.headers["Authorization"] = f"Bearer {self.token}"
        yield request
