from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Iterator, Optional, Sequence, Tuple

from ..core.exceptions import WeatherDataError

if TYPE_CHECKING:
    from ..presentation.units import UnitFormatter

HOUR = timedelta(hours=1)

RAIN_SYMBOL = "☔︎"
SNOW_SYMBOL = "❄"
MIXED_SYMBOL = RAIN_SYMBOL + SNOW_SYMBOL


@dataclass(frozen=True)
class WeatherSnapshot:
    temperature: float
    feels_like: Optional[float]
    humidity: Optional[float]
    pressure: Optional[float]
    wind_speed: Optional[float]
    wind_direction: Optional[float]
    gusts: Optional[float]
    icon_name: str
    condition: str
    sunrise: datetime
    sunset: datetime
    forecast: Optional["ForecastGrid"] = None
    precipitation_probability: Optional[float] = None
    precipitation: Optional[float] = None
    rain: Optional[float] = None
    showers: Optional[float] = None
    snowfall: Optional[float] = None

    def __post_init__(self) -> None:
        if not isinstance(self.condition, str):
            raise WeatherDataError("Weather condition not string")
        if self.forecast is not None and len(self.forecast) == 0:
            object.__setattr__(self, "forecast", None)

    @property
    def has_forecast(self) -> bool:
        return self.forecast is not None

    def forecast_day_count(self) -> int:
        return len(self.forecast.days) if self.forecast else 0

    def forecast_hour_count(self, day: int) -> int:
        return len(self.forecast.days[day]) if self.forecast else 0

    def forecast_day_hour(self, day: int, hour: int) -> "ForecastEntry":
        if self.forecast is None:
            raise IndexError("snapshot has no forecast")
        return self.forecast.days[day][hour]

    def display_temperature(self, fmt: "UnitFormatter") -> str:
        return fmt.format_temperature(self.temperature)

    def display_feels_like(self, fmt: "UnitFormatter") -> str:
        return fmt.format_temperature(self.feels_like)

    def display_humidity(self, fmt: "UnitFormatter") -> str:
        return fmt.format_humidity(self.humidity)

    def display_pressure(self, fmt: "UnitFormatter") -> str:
        return fmt.format_pressure(self.pressure)

    def display_wind(self, fmt: "UnitFormatter") -> str:
        direction = fmt.wind_direction(self.wind_direction)
        return fmt.format_wind(self.wind_speed, direction)

    def gusts_available(self) -> bool:
        if not isinstance(self.gusts, (int, float)) or isinstance(self.gusts, bool):
            return False
        return math.isfinite(self.gusts)

    def display_gusts(self, fmt: "UnitFormatter") -> str:
        return fmt.format_wind(self.gusts)

    def display_sunrise(self, fmt: "UnitFormatter") -> str:
        return fmt.format_time(self.sunrise)

    def display_sunset(self, fmt: "UnitFormatter") -> str:
        return fmt.format_time(self.sunset)

    def has_precipitation(self) -> bool:
        """True when either the probability or the amount is positive."""

        return bool(
            (self.precipitation_probability and self.precipitation_probability > 0)
            or (self.precipitation and self.precipitation > 0)
        )

    def precipitation_symbol(self) -> Optional[str]:
        if not self.has_precipitation():
            return None
        liquid = (self.rain or 0) + (self.showers or 0)
        snow = self.snowfall or 0
        if liquid > 0 and snow > 0:
            return MIXED_SYMBOL
        if snow > 0:
            return SNOW_SYMBOL
        return RAIN_SYMBOL


@dataclass(frozen=True)
class ForecastEntry:
    start: datetime
    end: datetime
    weather: WeatherSnapshot

    @classmethod
    def for_hour(cls, start: datetime, weather: WeatherSnapshot) -> "ForecastEntry":
        return cls(start=start, end=start + HOUR, weather=weather)

    @property
    def duration_hours(self) -> float:
        return (self.end - self.start) / HOUR

    def display_time(self, fmt: "UnitFormatter") -> str:
        return fmt.format_time(self.start)


@dataclass(frozen=True)
class ForecastGrid:
    """Day-major, hour-minor forecast entries for one fetch."""

    days: Tuple[Tuple[ForecastEntry, ...], ...] = field(default_factory=tuple)

    @classmethod
    def from_days(cls, days: Sequence[Sequence[ForecastEntry]]) -> "ForecastGrid":
        return cls(days=tuple(tuple(day) for day in days))

    def entries(self) -> Iterator[ForecastEntry]:
        for day in self.days:
            yield from day

    def day(self, index: int) -> Tuple[ForecastEntry, ...]:
        if 0 <= index < len(self.days):
            return self.days[index]
        return ()

    def __len__(self) -> int:
        return len(self.days)
