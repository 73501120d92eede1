"""Operations behind the preferences window.

Every setter validates its input and writes through to the settings store;
the widgets themselves belong to the host toolkit.
"""

from __future__ import annotations

import logging
from typing import List

from meteopanel.core.exceptions import ValidationError
from meteopanel.domain.locations import Location, NameType, PlaceType
from meteopanel.domain.units import (
    ClockFormat,
    PressureUnit,
    TemperatureUnit,
    WindSpeedUnit,
)
from meteopanel.infrastructure.settings_store import JsonSettingsStore
from meteopanel.presentation.validation import (
    CoordinatesModel,
    LocationInputModel,
    RefreshMinutesModel,
    validate_payload,
)

logger = logging.getLogger(__name__)

MY_LOCATION_PLACE = "here"


class PreferencesController:

    def __init__(self, settings: JsonSettingsStore) -> None:
        self._settings = settings

    # General page

    def refresh_minutes(self) -> tuple[int, int]:
        return (
            self._settings.get("refresh-interval-current") // 60,
            self._settings.get("refresh-interval-forecast") // 60,
        )

    def set_refresh_minutes(self, current=None, forecast=None) -> None:
        payload = validate_payload(
            RefreshMinutesModel, current=current, forecast=forecast
        )
        if payload.current is not None:
            self._settings.set("refresh-interval-current", payload.current * 60)
        if payload.forecast is not None:
            self._settings.set("refresh-interval-forecast", payload.forecast * 60)

    def set_forecast_disabled(self, disabled: bool) -> None:
        self._settings.set("disable-forecast", disabled)

    def set_forecast_days(self, days: int) -> None:
        self._settings.set("days-forecast", days)

    def set_startup_delay(self, seconds: int) -> None:
        self._settings.set("delay-ext-init", seconds)

    def simplify_degrees_sensitive(self) -> bool:
        """Simplifying only applies to degree units, not Kelvin."""

        return self._settings.get("unit") != TemperatureUnit.KELVIN.value

    def set_units(
        self,
        temperature: TemperatureUnit | None = None,
        wind_speed: WindSpeedUnit | None = None,
        pressure: PressureUnit | None = None,
        clock_format: ClockFormat | None = None,
    ) -> None:
        if temperature is not None:
            self._settings.set("unit", TemperatureUnit(temperature).value)
        if wind_speed is not None:
            self._settings.set("wind-speed-unit", WindSpeedUnit(wind_speed).value)
        if pressure is not None:
            self._settings.set("pressure-unit", PressureUnit(pressure).value)
        if clock_format is not None:
            self._settings.set("clock-format", ClockFormat(clock_format).value)

    def set_simplify_degrees(self, enabled: bool) -> None:
        self._settings.set("simplify-degrees", enabled)

    def restore_defaults(self) -> None:
        self._settings.reset_all()
        logger.info("Settings restored to defaults")

    # Locations page

    def locations(self) -> List[Location]:
        return self._settings.locations()

    def add_location(self, place: str, name: str = "") -> Location:
        """Add ``"lat,lon"``, ``"here"`` or a free-text place to geocode."""

        payload = validate_payload(LocationInputModel, name=name, place=place)
        name_type = NameType.CUSTOM if payload.name else NameType.MY_LOC
        if payload.place.lower() == MY_LOCATION_PLACE:
            location = Location(name_type, payload.name, PlaceType.MY_LOC)
        elif _looks_like_coordinates(payload.place):
            coords = CoordinatesModel.parse(payload.place)
            location = Location(
                NameType.CUSTOM, payload.name, PlaceType.COORDS, coords.as_place()
            )
        else:
            location = Location(
                NameType.CUSTOM, payload.name, PlaceType.SEARCH, payload.place
            )

        locations = self.locations()
        locations.append(location)
        self._settings.set_locations(locations)
        return location

    def remove_location(self, index: int) -> None:
        locations = self.locations()
        if not 0 <= index < len(locations):
            raise ValidationError(f"No location at index {index}")
        del locations[index]
        self._settings.set_locations(locations)

        selected = self._settings.get("actual-city")
        if index < selected:
            selected -= 1
            self._settings.set("actual-city", selected)
        if selected >= len(locations):
            self._settings.set("actual-city", max(len(locations) - 1, 0))

    def select_location(self, index: int) -> Location:
        locations = self.locations()
        if not 0 <= index < len(locations):
            raise ValidationError(f"No location at index {index}")
        self._settings.set("actual-city", index)
        return locations[index]


def _looks_like_coordinates(place: str) -> bool:
    parts = place.replace(" ", "").split(",")
    if len(parts) != 2:
        return False
    try:
        float(parts[0])
        float(parts[1])
    except ValueError:
        return False
    return True
