import json
import logging
from datetime import datetime
from typing import Callable, Dict, Optional, Tuple

import httpx

from ..core.config import DEFAULT_GEOCODE_API_URL, DEFAULT_WEATHER_API_URL
from ..core.exceptions import GeocodeServiceError, WeatherServiceError
from ..domain.open_meteo import (
    CURRENT_FIELDS,
    DAILY_FIELDS,
    HOURLY_FIELDS,
    build_weather,
)
from ..domain.services import Coordinates, GeocodeService, Translator, WeatherService
from ..domain.weather import WeatherSnapshot

DEFAULT_TIMEOUT = 10.0

logger = logging.getLogger(__name__)


def is_success(status_code: int) -> bool:

    return 200 <= status_code < 300


class OpenMeteoWeatherService(WeatherService):

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        api_url: str = DEFAULT_WEATHER_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:

        self._http_client = http_client
        self._api_url = api_url
        self._timeout = timeout
        self._clock = clock

    @staticmethod
    def build_params(lat: float, lon: float) -> Dict[str, str]:

        return {
            "latitude": str(lat),
            "longitude": str(lon),
            "timezone": "auto",
            "temperature_unit": "celsius",
            "wind_speed_unit": "ms",
            "current": CURRENT_FIELDS,
            "hourly": HOURLY_FIELDS,
            "daily": DAILY_FIELDS,
        }

    async def _request_forecast(
        self, client: httpx.AsyncClient, lat: float, lon: float
    ) -> Tuple[int, Optional[dict]]:

        response = await client.get(
            self._api_url, params=self.build_params(lat, lon), timeout=self._timeout
        )
        if not is_success(response.status_code):
            return response.status_code, None
        return response.status_code, response.json()

    async def fetch_weather(
        self,
        coordinates: Coordinates,
        forecast_days: int,
        translate: Optional[Translator] = None,
    ) -> Optional[WeatherSnapshot]:

        lat, lon = coordinates
        try:
            if self._http_client is None:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    status, payload = await self._request_forecast(client, lat, lon)
            else:
                status, payload = await self._request_forecast(
                    self._http_client, lat, lon
                )
        except (httpx.HTTPError, json.JSONDecodeError) as e:
            raise WeatherServiceError(f"Weather fetch error: {e}") from e

        if payload is None:
            logger.warning("Open-Meteo answered with HTTP %s", status)
            return None

        now = self._clock() if self._clock else None
        weather = build_weather(payload, forecast_days, translate, now=now)
        logger.debug(
            "Weather fetched: %d forecast day(s)", weather.forecast_day_count()
        )
        return weather


class NominatimGeocodeService(GeocodeService):

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        api_url: str = DEFAULT_GEOCODE_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:

        self._http_client = http_client
        self._api_url = api_url
        self._timeout = timeout

    async def _perform_request(
        self, client: httpx.AsyncClient, city: str
    ) -> Optional[Tuple[float, float, str]]:

        params = {"q": city, "format": "json", "limit": 1}
        headers = {"User-Agent": "meteopanel/1.0"}
        response = await client.get(
            self._api_url, params=params, headers=headers, timeout=self._timeout
        )
        response.raise_for_status()
        data = response.json()
        if not data:
            return None
        result = data[0]
        lat = float(result["lat"])
        lon = float(result["lon"])
        display_name = result.get("display_name", city)
        return lat, lon, display_name

    async def geocode_city(self, city: str) -> Optional[Tuple[float, float, str]]:

        try:
            if self._http_client is None:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    return await self._perform_request(client, city)

            return await self._perform_request(self._http_client, city)
        except Exception as e:
            raise GeocodeServiceError(f"Geocoding error: {e}") from e
