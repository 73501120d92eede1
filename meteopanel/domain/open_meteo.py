"""Build weather snapshots from an Open-Meteo forecast payload."""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Any, Iterable, List, Optional

import pytz

from ..core.exceptions import WeatherServiceError
from .conditions import Translator, condition_text_for, icon_name_for, is_night_time
from .weather import ForecastEntry, ForecastGrid, WeatherSnapshot

HOURS_PER_DAY = 24
MAX_EXTRA_DAYS = 7

MEASUREMENTS = (
    "temperature_2m",
    "apparent_temperature",
    "relative_humidity_2m",
    "surface_pressure",
    "wind_speed_10m",
    "wind_direction_10m",
    "wind_gusts_10m",
    "weather_code",
)
PRECIPITATION = (
    "precipitation_probability",
    "precipitation",
    "rain",
    "showers",
    "snowfall",
)

CURRENT_FIELDS = ",".join(MEASUREMENTS)
HOURLY_FIELDS = ",".join(MEASUREMENTS + PRECIPITATION)
DAILY_FIELDS = "sunrise,sunset"


def clamp_forecast_days(extra_days: int) -> int:
    """Total number of grid days (today included) for a requested horizon."""

    try:
        extra = int(extra_days)
    except (TypeError, ValueError):
        extra = 0
    return min(max(1, extra + 1), MAX_EXTRA_DAYS + 1)


def _safe_float(value: Any) -> Optional[float]:
    try:
        if value is None or isinstance(value, bool):
            return None
        return float(value)
    except (TypeError, ValueError):
        return None


def _safe_int(value: Any) -> Optional[int]:
    try:
        if value is None or isinstance(value, bool):
            return None
        return int(value)
    except (TypeError, ValueError):
        return None


def _ensure_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, tuple):
        return list(value)
    return [value]


def _get_index(seq: Iterable[Any], index: int) -> Any:
    if isinstance(seq, (list, tuple)) and 0 <= index < len(seq):
        return seq[index]
    return None


def resolve_zone(payload: dict[str, Any]) -> tzinfo:
    """Zone of the local timestamps Open-Meteo returns for ``timezone=auto``."""

    name = payload.get("timezone")
    if name:
        try:
            return pytz.timezone(str(name))
        except (pytz.UnknownTimeZoneError, ValueError):
            pass
    offset = _safe_int(payload.get("utc_offset_seconds"))
    if offset is not None:
        try:
            return pytz.FixedOffset(offset // 60)
        except ValueError:
            pass
    return pytz.UTC


def parse_instant(value: Any, zone: tzinfo) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = zone.localize(parsed)
    return parsed


def _weather_code(block: dict[str, Any], index: Optional[int] = None) -> Optional[int]:
    raw = block.get("weather_code", block.get("weathercode"))
    if index is not None:
        raw = _get_index(_ensure_list(raw), index)
    return _safe_int(raw)


def _build_hour(
    hourly: dict[str, Any],
    idx: int,
    zone: tzinfo,
    sunrise: datetime,
    sunset: datetime,
    translate: Optional[Translator],
) -> Optional[ForecastEntry]:
    start = parse_instant(_get_index(_ensure_list(hourly.get("time")), idx), zone)
    if start is None:
        return None

    def value(name: str) -> Optional[float]:
        return _safe_float(_get_index(_ensure_list(hourly.get(name)), idx))

    temperature = value("temperature_2m")
    if temperature is None:
        return None

    code = _weather_code(hourly, idx)
    night = is_night_time(start, sunrise, sunset)
    weather = WeatherSnapshot(
        temperature=temperature,
        feels_like=value("apparent_temperature"),
        humidity=value("relative_humidity_2m"),
        pressure=value("surface_pressure"),
        wind_speed=value("wind_speed_10m"),
        wind_direction=value("wind_direction_10m"),
        gusts=value("wind_gusts_10m"),
        icon_name=icon_name_for(code, night),
        condition=condition_text_for(code, translate),
        sunrise=sunrise,
        sunset=sunset,
        precipitation_probability=value("precipitation_probability"),
        precipitation=value("precipitation"),
        rain=value("rain"),
        showers=value("showers"),
        snowfall=value("snowfall"),
    )
    return ForecastEntry.for_hour(start, weather)


def build_forecast_grid(
    hourly: dict[str, Any],
    day_count: int,
    zone: tzinfo,
    sunrise: datetime,
    sunset: datetime,
    translate: Optional[Translator] = None,
) -> ForecastGrid:
    """Slice the flat hourly series into days.

    A day stops at the first hour the series cannot provide; no padding is
    added for the missing hours.
    """

    days: List[List[ForecastEntry]] = []
    for day in range(day_count):
        entries: List[ForecastEntry] = []
        for hour in range(HOURS_PER_DAY):
            entry = _build_hour(
                hourly, day * HOURS_PER_DAY + hour, zone, sunrise, sunset, translate
            )
            if entry is None:
                break
            entries.append(entry)
        days.append(entries)
    return ForecastGrid.from_days(days)


def build_weather(
    payload: dict[str, Any],
    forecast_days: int,
    translate: Optional[Translator] = None,
    now: Optional[datetime] = None,
) -> WeatherSnapshot:
    """Build the current snapshot, with its forecast grid, from a payload."""

    if not isinstance(payload, dict):
        raise WeatherServiceError("Unexpected forecast payload")

    zone = resolve_zone(payload)
    daily = payload.get("daily") or {}
    if not isinstance(daily, dict):
        raise WeatherServiceError("Forecast payload has a malformed daily block")
    sunrise = parse_instant(_get_index(_ensure_list(daily.get("sunrise")), 0), zone)
    sunset = parse_instant(_get_index(_ensure_list(daily.get("sunset")), 0), zone)
    if sunrise is None or sunset is None:
        raise WeatherServiceError("Forecast payload has no sunrise/sunset")

    current = payload.get("current")
    if not isinstance(current, dict):
        raise WeatherServiceError("Forecast payload has no current block")
    temperature = _safe_float(current.get("temperature_2m"))
    if temperature is None:
        raise WeatherServiceError("Forecast payload has no current temperature")

    hourly = payload.get("hourly") or {}
    if not isinstance(hourly, dict):
        raise WeatherServiceError("Forecast payload has a malformed hourly block")
    grid = build_forecast_grid(
        hourly,
        clamp_forecast_days(forecast_days),
        zone,
        sunrise,
        sunset,
        translate,
    )

    if now is None:
        now = datetime.now(pytz.UTC)
    code = _weather_code(current)
    night = is_night_time(now, sunrise, sunset)
    return WeatherSnapshot(
        temperature=temperature,
        feels_like=_safe_float(current.get("apparent_temperature")),
        humidity=_safe_float(current.get("relative_humidity_2m")),
        pressure=_safe_float(current.get("surface_pressure")),
        wind_speed=_safe_float(current.get("wind_speed_10m")),
        wind_direction=_safe_float(current.get("wind_direction_10m")),
        gusts=_safe_float(current.get("wind_gusts_10m")),
        icon_name=icon_name_for(code, night),
        condition=condition_text_for(code, translate),
        sunrise=sunrise,
        sunset=sunset,
        forecast=grid,
    )
