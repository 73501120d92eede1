from abc import ABC, abstractmethod
from typing import Any, Optional, Tuple

from .conditions import Translator
from .weather import WeatherSnapshot

Coordinates = Tuple[float, float]


class WeatherService(ABC):

    @abstractmethod
    async def fetch_weather(
        self,
        coordinates: Coordinates,
        forecast_days: int,
        translate: Optional[Translator] = None,
    ) -> Optional[WeatherSnapshot]:

        pass


class GeocodeService(ABC):

    @abstractmethod
    async def geocode_city(self, city: str) -> Optional[Tuple[float, float, str]]:

        pass


class CoordinatesProvider(ABC):

    @abstractmethod
    async def get_coords(self, settings: Any) -> Coordinates:

        pass
