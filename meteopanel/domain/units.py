from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TemperatureUnit(str, Enum):
    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"
    KELVIN = "kelvin"


class WindSpeedUnit(str, Enum):
    KPH = "kph"
    MPH = "mph"
    MPS = "mps"
    KNOTS = "knots"
    BEAUFORT = "beaufort"


class PressureUnit(str, Enum):
    HPA = "hpa"
    MBAR = "mbar"
    INHG = "inhg"
    BAR = "bar"
    PA = "pa"
    KPA = "kpa"
    ATM = "atm"
    MMHG = "mmhg"


class ClockFormat(str, Enum):
    H24 = "24h"
    H12 = "12h"
    SYSTEM = "system"


@dataclass(frozen=True)
class UnitPreferences:
    temperature: TemperatureUnit = TemperatureUnit.CELSIUS
    wind_speed: WindSpeedUnit = WindSpeedUnit.KPH
    pressure: PressureUnit = PressureUnit.MBAR
    clock_format: ClockFormat = ClockFormat.H24
    simplify_degrees: bool = False
    decimal_places: int = 1
