"""HTTP client for the remote sleep quality prediction service."""

from typing import Any, Dict, Optional, Protocol

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from sleepbot.config import settings
from sleepbot.errors import ConnectivityFailure, MalformedResponse, ServerError
from sleepbot.survey.transformer import encode_payload

logger = structlog.get_logger(__name__)


class PredictionResponse(BaseModel):
    """Successful answer from the prediction service."""

    model_config = ConfigDict(extra="ignore")

    prediction: str = Field(..., min_length=1)


class PredictionClient(Protocol):
    """Anything that can deliver a payload and return a prediction."""

    async def send(self, payload: Dict[str, Any]) -> PredictionResponse:
        ...

    async def check_health(self) -> None:
        ...


class HttpPredictionClient:
    """Client for the prediction endpoint."""

    def __init__(
        self,
        api_url: Optional[str] = None,
        health_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url or settings.prediction_api_url
        self.health_url = health_url if health_url is not None else settings.prediction_health_url
        self.timeout = timeout if timeout is not None else settings.prediction_timeout
        self.transport = transport
        self.headers = {"Content-Type": "application/json"}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def send(self, payload: Dict[str, Any]) -> PredictionResponse:
        """POST the payload and parse the prediction out of the response."""
        async with self._client() as client:
            try:
                response = await client.post(
                    self.api_url,
                    content=encode_payload(payload),
                    headers=self.headers,
                )
            except httpx.TransportError as exc:
                logger.warning("Prediction service unreachable", url=self.api_url, error=str(exc))
                raise ConnectivityFailure(str(exc)) from exc

        if not response.is_success:
            logger.warning(
                "Prediction service returned an error",
                url=self.api_url,
                status_code=response.status_code,
            )
            raise ServerError(response.status_code, response.text[:200] or None)

        try:
            return PredictionResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            logger.warning("Malformed prediction response", body=response.text[:200])
            raise MalformedResponse(str(exc)) from exc

    async def check_health(self) -> None:
        """Probe the companion health endpoint; any failure means unreachable."""
        if not self.health_url:
            raise ConnectivityFailure("No health endpoint configured")

        async with self._client() as client:
            try:
                response = await client.get(self.health_url)
            except httpx.TransportError as exc:
                logger.warning("Health probe failed", url=self.health_url, error=str(exc))
                raise ConnectivityFailure(str(exc)) from exc

        if not response.is_success:
            logger.warning("Health probe rejected", url=self.health_url, status_code=response.status_code)
            raise ConnectivityFailure(f"Health endpoint returned HTTP {response.status_code}")
