"""WMO weather code tables used by Open-Meteo."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional, Tuple

Translator = Callable[[str], str]

CLEAR = "clear"
FEW_CLOUDS = "few-clouds"
OVERCAST = "overcast"
FOG = "fog"
FREEZING_RAIN = "freezing-rain"
SHOWERS = "showers"
SHOWERS_SCATTERED = "showers-scattered"
SNOW = "snow"
STORM = "storm"

# Generic cloud icon, also used for codes missing from the table.
CLOUDS = FEW_CLOUDS

NIGHT_VARIANTS = frozenset({CLEAR, FEW_CLOUDS})

NOT_AVAILABLE = "Not available"

ICON_MAP: dict[int, str] = {
    0: CLEAR,
    1: FEW_CLOUDS,
    2: CLOUDS,
    3: OVERCAST,
    45: FOG,
    48: FOG,
    51: SHOWERS_SCATTERED,
    53: SHOWERS_SCATTERED,
    55: SHOWERS,
    56: FREEZING_RAIN,
    57: FREEZING_RAIN,
    61: SHOWERS_SCATTERED,
    63: SHOWERS,
    65: SHOWERS,
    66: FREEZING_RAIN,
    67: FREEZING_RAIN,
    71: SNOW,
    73: SNOW,
    75: SNOW,
    77: SNOW,
    80: SHOWERS_SCATTERED,
    81: SHOWERS,
    82: SHOWERS,
    85: SNOW,
    86: SNOW,
    95: STORM,
    96: STORM,
    99: STORM,
}

CONDITION_MAP: dict[int, str] = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snow fall",
    73: "Moderate snow fall",
    75: "Heavy snow fall",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}


def icon_name_for(code: Optional[int], is_night: bool) -> str:
    """Return the symbolic icon name for a weather code."""

    name = None
    if isinstance(code, int) and not isinstance(code, bool):
        name = ICON_MAP.get(code)
    if not name:
        name = CLOUDS

    full_name = f"weather-{name}"
    if is_night and name in NIGHT_VARIANTS:
        full_name += "-night"
    return full_name + "-symbolic"


def condition_text_for(
    code: Optional[int], translate: Optional[Translator] = None
) -> str:
    """Return the (translated) condition text, or "" without a translator."""

    if translate is None:
        return ""
    return translate(CONDITION_MAP.get(code, NOT_AVAILABLE))


def map_condition_code(
    code: Optional[int], is_night: bool, translate: Optional[Translator] = None
) -> Tuple[str, str]:

    return icon_name_for(code, is_night), condition_text_for(code, translate)


def is_night_time(time: datetime, sunrise: datetime, sunset: datetime) -> bool:

    return time < sunrise or time >= sunset
