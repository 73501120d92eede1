import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..domain.weather import WeatherSnapshot


@dataclass(frozen=True)
class CachedWeather:
    weather: WeatherSnapshot
    fetched_at: datetime


class WeatherCache:
    """Single slot holding the latest snapshot.

    A refresh swaps the whole entry; readers keep whatever entry they already
    hold.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entry: Optional[CachedWeather] = None

    @property
    def entry(self) -> Optional[CachedWeather]:
        return self._entry

    @property
    def current(self) -> Optional[WeatherSnapshot]:
        entry = self._entry
        return entry.weather if entry else None

    def replace(self, weather: WeatherSnapshot, fetched_at: datetime) -> CachedWeather:
        entry = CachedWeather(weather=weather, fetched_at=fetched_at)
        with self._lock:
            self._entry = entry
        return entry

    def clear(self) -> None:
        with self._lock:
            self._entry = None
