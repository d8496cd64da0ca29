"""Observation provider interface.

A provider turns a station name into a `WeatherSnapshot`. Concrete providers
only know their own wire format; HTTP plumbing, retries and error mapping
live here.

## Snapshot units

- Temperature: °C
- Wind: m/s, direction in degrees clockwise from north
- Pressure: hPa
- Precipitation: mm
- Humidity: 0-1 fraction (upstreams usually publish a percentage)

A reading the station did not report is None rather than 0.

## Failure model

`_get_json` retries a timeout or a dropped connection once after a short
backoff. Anything else surfaces as `ProviderError`, which the weather
resolver turns into a degraded snapshot.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from sports_tracker.exceptions import UpstreamError
from sports_tracker.models.weather import WeatherSnapshot

TRANSIENT_ERRORS = (httpx.TimeoutException, httpx.NetworkError)


class ProviderError(UpstreamError):
    """An observation provider failed or answered with something unusable."""

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.response_body = response_body


class RateLimitError(ProviderError):
    """The provider answered 429."""

    def __init__(self, provider: str, retry_after: int | None = None):
        super().__init__(f"{provider} rate limit reached", provider=provider, status_code=429)
        self.retry_after = retry_after


class StationNotFoundError(ProviderError):
    """The provider has no observation for the requested station."""


class WeatherProvider(ABC):
    """Base class for observation providers.

    Subclasses set `name` and `base_url`, implement `get_current_conditions`
    and translate the upstream payload in `_translate_response`.

    Example:
        ```python
        class ExampleProvider(WeatherProvider):
            name = "example"
            base_url = "https://observations.example.com"

            async def get_current_conditions(self, station_name):
                data = await self._get_json(f"{self.base_url}/now", {"station": station_name})
                return self._translate_response(data, station_name)
        ```

    An injected `client` is used as-is and left open on exit; otherwise the
    provider creates its own client and closes it in `aclose()`.
    """

    name: str
    base_url: str
    requires_api_key: bool = False

    def __init__(
        self,
        api_key: str | None = None,
        user_agent: str | None = None,
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.user_agent = user_agent or "sports-tracker/0.1.0"
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> WeatherProvider:
        self._http()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this provider opened it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent, "Accept": "application/json"},
            )
            self._owns_client = True
        return self._client

    @property
    def is_configured(self) -> bool:
        """True when the provider has every credential it needs."""
        return not self.requires_api_key or bool(self.api_key)

    def _check_status(self, response: httpx.Response) -> None:
        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After", "")
            raise RateLimitError(self.name, int(retry_after) if retry_after.isdigit() else None)

        if response.is_error:
            raise ProviderError(
                f"{self.name} answered HTTP {response.status_code}",
                provider=self.name,
                status_code=response.status_code,
                response_body=response.text,
            )

    @retry(
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=2),
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        reraise=True,
    )
    async def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """GET a JSON document.

        Raises:
            RateLimitError: HTTP 429
            ProviderError: Any other error status, or a body that is not JSON
            httpx.TimeoutException, httpx.NetworkError: Still failing after the retry
        """
        response = await self._http().get(url, params=params)
        self._check_status(response)

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(
                f"Failed to parse {self.name} response: {e}",
                provider=self.name,
                response_body=response.text,
            ) from e

    @abstractmethod
    async def get_current_conditions(self, station_name: str) -> WeatherSnapshot:
        """Latest observation for a station.

        Raises:
            ProviderError: The observation could not be fetched
            StationNotFoundError: The provider does not know the station
        """

    @abstractmethod
    def _translate_response(self, response_data: Any, station_name: str) -> WeatherSnapshot:
        """Map an upstream payload for `station_name` onto a WeatherSnapshot."""
