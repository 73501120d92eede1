import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional

import httpx

from meteopanel.application.weather_cache import CachedWeather, WeatherCache
from meteopanel.core.exceptions import PanelError
from meteopanel.domain.conditions import Translator
from meteopanel.domain.services import CoordinatesProvider, WeatherService
from meteopanel.infrastructure.settings_store import JsonSettingsStore

logger = logging.getLogger(__name__)

FAILURE_BACKOFF_SEC = 600

WeatherListener = Callable[[CachedWeather], Awaitable[None]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RefreshDependencies:
    weather_service: WeatherService
    coordinates_provider: CoordinatesProvider
    settings: JsonSettingsStore
    cache: WeatherCache
    translate: Optional[Translator] = None
    listeners: List[WeatherListener] = field(default_factory=list)
    clock: Callable[[], datetime] = _utcnow
    failure_backoff_sec: int = FAILURE_BACKOFF_SEC


class WeatherRefresher:
    """Periodically fetch weather and hand new snapshots to listeners."""

    def __init__(self, deps: RefreshDependencies) -> None:
        self._deps = deps
        self._stop = asyncio.Event()
        self._wake = asyncio.Event()

    def add_listener(self, listener: WeatherListener) -> None:
        self._deps.listeners.append(listener)

    def _condition_translator(self) -> Optional[Translator]:
        if not self._deps.settings.get("translate-condition"):
            return None
        return self._deps.translate

    async def refresh_once(self) -> int:
        """Fetch once and return the delay in seconds until the next fetch."""

        deps = self._deps
        backoff = deps.failure_backoff_sec
        try:
            coords = await deps.coordinates_provider.get_coords(deps.settings)
            weather = await deps.weather_service.fetch_weather(
                coords, deps.settings.forecast_days(), self._condition_translator()
            )
        except (PanelError, httpx.HTTPError):
            logger.exception("Weather refresh failed; retrying in %ss", backoff)
            return backoff
        except Exception:
            logger.exception(
                "Unexpected error during weather refresh; retrying in %ss", backoff
            )
            return backoff

        if weather is None:
            logger.warning(
                "Weather refresh returned no data; retrying in %ss", backoff
            )
            return backoff

        entry = deps.cache.replace(weather, deps.clock())
        for listener in list(deps.listeners):
            try:
                await listener(entry)
            except Exception:
                logger.exception("Weather listener %r failed", listener)
        return deps.settings.get("refresh-interval-current")

    def request_refresh(self) -> None:
        """Cut the current wait short and fetch again."""

        self._wake.set()

    def stop(self) -> None:
        self._stop.set()
        self._wake.set()

    async def _sleep(self, seconds: float) -> None:
        try:
            await asyncio.wait_for(self._wake.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass
        self._wake.clear()

    async def run(self, startup_delay: Optional[float] = None) -> None:

        if startup_delay is None:
            startup_delay = self._deps.settings.get("delay-ext-init")
        if startup_delay:
            await self._sleep(startup_delay)

        while not self._stop.is_set():
            delay = await self.refresh_once()
            if self._stop.is_set():
                break
            logger.debug("Next weather refresh in %ss", delay)
            await self._sleep(delay)
