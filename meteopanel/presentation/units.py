"""Conversion of metric base values into display strings."""

from __future__ import annotations

import math
from bisect import bisect_right
from datetime import datetime
from typing import Callable, Optional

from meteopanel.core.exceptions import InvalidValueError
from meteopanel.domain.units import (
    ClockFormat,
    PressureUnit,
    TemperatureUnit,
    UnitPreferences,
    WindSpeedUnit,
)

COMPASS_POINTS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")

# Lower bounds in m/s for Beaufort forces 1..12.
BEAUFORT_BOUNDS = (0.5, 1.6, 3.4, 5.5, 8.0, 10.8, 13.9, 17.2, 20.8, 24.5, 28.5, 32.7)

_WIND_FACTORS = {
    WindSpeedUnit.KPH: (3.6, "km/h"),
    WindSpeedUnit.MPH: (2.2369362920544, "mph"),
    WindSpeedUnit.MPS: (1.0, "m/s"),
    WindSpeedUnit.KNOTS: (1.9438444924406, "kn"),
}

# factor from mbar, label, digits
_PRESSURE_FACTORS = {
    PressureUnit.HPA: (1.0, "hPa", 0),
    PressureUnit.MBAR: (1.0, "mbar", 0),
    PressureUnit.INHG: (0.0295299830714, "inHg", 2),
    PressureUnit.BAR: (0.001, "bar", 3),
    PressureUnit.PA: (100.0, "Pa", 0),
    PressureUnit.KPA: (0.1, "kPa", 1),
    PressureUnit.ATM: (0.000986923266716, "atm", 3),
    PressureUnit.MMHG: (0.750061561303, "mmHg", 0),
}


def _require_number(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidValueError(value)
    if math.isnan(value) or math.isinf(value):
        raise InvalidValueError(value)
    return float(value)


def _format_number(value: float, digits: int) -> str:
    text = f"{value:.{max(digits, 0)}f}"
    # "-0" and "-0.0" read badly in a panel.
    if text.startswith("-") and float(text) == 0:
        text = text[1:]
    return text


def celsius_to(value: float, unit: TemperatureUnit) -> float:

    celsius = _require_number(value)
    if unit is TemperatureUnit.FAHRENHEIT:
        return celsius * 9 / 5 + 32
    if unit is TemperatureUnit.KELVIN:
        return celsius + 273.15
    return celsius


def beaufort_force(mps: float) -> int:

    return bisect_right(BEAUFORT_BOUNDS, _require_number(mps))


class UnitFormatter:
    """Formats raw metric values according to the user's unit preferences."""

    def __init__(
        self,
        preferences: Optional[UnitPreferences] = None,
        translate: Optional[Callable[[str], str]] = None,
    ) -> None:

        self.preferences = preferences or UnitPreferences()
        self._translate = translate or (lambda text: text)

    def format_temperature(self, celsius: float) -> str:

        unit = self.preferences.temperature
        value = _format_number(
            celsius_to(celsius, unit), self.preferences.decimal_places
        )
        if unit is TemperatureUnit.KELVIN:
            return f"{value} K"
        if self.preferences.simplify_degrees:
            return f"{value}°"
        suffix = "F" if unit is TemperatureUnit.FAHRENHEIT else "C"
        return f"{value}°{suffix}"

    def wind_direction(self, degrees: float) -> str:

        deg = _require_number(degrees) % 360
        index = int(math.floor(deg / 45 + 0.5)) % len(COMPASS_POINTS)
        return self._translate(COMPASS_POINTS[index])

    def format_wind(self, mps: float, direction: Optional[str] = None) -> str:

        speed = _require_number(mps)
        unit = self.preferences.wind_speed
        if unit is WindSpeedUnit.BEAUFORT:
            text = f"{beaufort_force(speed)} {self._translate('Bft')}"
        else:
            factor, label = _WIND_FACTORS[unit]
            text = f"{_format_number(speed * factor, 1)} {self._translate(label)}"
        if direction:
            return f"{direction} {text}"
        return text

    def format_pressure(self, mbar: float) -> str:

        factor, label, digits = _PRESSURE_FACTORS[self.preferences.pressure]
        value = _require_number(mbar) * factor
        return f"{_format_number(value, digits)} {self._translate(label)}"

    def format_humidity(self, percent: float) -> str:

        return f"{_format_number(_require_number(percent), 0)}%"

    def format_time(self, instant: datetime) -> str:

        if not isinstance(instant, datetime):
            raise InvalidValueError(instant)
        if self.preferences.clock_format is ClockFormat.H12:
            hour = instant.hour % 12 or 12
            marker = "AM" if instant.hour < 12 else "PM"
            return f"{hour}:{instant.minute:02d} {self._translate(marker)}"
        return f"{instant.hour:02d}:{instant.minute:02d}"
