import pytest

from meteopanel.core.exceptions import ValidationError
from meteopanel.domain.locations import NameType, PlaceType
from meteopanel.domain.units import PressureUnit, TemperatureUnit, WindSpeedUnit
from meteopanel.presentation.preferences import PreferencesController
from meteopanel.presentation.validation import (
    CoordinatesModel,
    LocationInputModel,
    validate_payload,
)


@pytest.fixture
def controller(settings_store) -> PreferencesController:
    return PreferencesController(settings_store)


def test_refresh_minutes(controller, settings_store):
    assert controller.refresh_minutes() == (10, 60)

    controller.set_refresh_minutes(current=15, forecast=120)

    assert settings_store.get("refresh-interval-current") == 900
    assert settings_store.get("refresh-interval-forecast") == 7200
    assert controller.refresh_minutes() == (15, 120)


@pytest.mark.parametrize(
    "values",
    [dict(current=5), dict(forecast=10), dict(current=2000), dict(current="x")],
)
def test_refresh_minutes_out_of_range(controller, values):
    with pytest.raises(ValidationError):
        controller.set_refresh_minutes(**values)


def test_forecast_settings(controller, settings_store):
    controller.set_forecast_days(5)
    controller.set_startup_delay(0)
    assert settings_store.forecast_days() == 5
    assert settings_store.get("delay-ext-init") == 0

    controller.set_forecast_disabled(True)
    assert settings_store.forecast_days() == 0

    with pytest.raises(ValidationError):
        controller.set_forecast_days(12)


def test_units(controller, settings_store):
    controller.set_units(
        temperature=TemperatureUnit.FAHRENHEIT,
        wind_speed=WindSpeedUnit.KNOTS,
        pressure="inhg",
    )
    prefs = settings_store.unit_preferences()
    assert prefs.temperature is TemperatureUnit.FAHRENHEIT
    assert prefs.wind_speed is WindSpeedUnit.KNOTS
    assert prefs.pressure is PressureUnit.INHG

    with pytest.raises(ValueError):
        controller.set_units(pressure="torr")


def test_simplify_degrees_only_for_degree_units(controller):
    assert controller.simplify_degrees_sensitive()
    controller.set_units(temperature=TemperatureUnit.KELVIN)
    assert not controller.simplify_degrees_sensitive()


def test_restore_defaults(controller, settings_store):
    controller.set_units(temperature=TemperatureUnit.KELVIN)
    controller.set_simplify_degrees(True)

    controller.restore_defaults()

    assert settings_store.get("unit") == "celsius"
    assert settings_store.get("simplify-degrees") is False


def test_add_locations(controller):
    here = controller.add_location("here")
    berlin = controller.add_location(" 52.52, 13.40 ", "Berlin")
    paris = controller.add_location("Paris, France")

    assert here.place_type is PlaceType.MY_LOC
    assert here.name_type is NameType.MY_LOC
    assert berlin.place_type is PlaceType.COORDS
    assert berlin.place == "52.52,13.4"
    assert berlin.name == "Berlin"
    assert paris.place_type is PlaceType.SEARCH
    assert paris.place == "Paris, France"
    assert controller.locations() == [here, berlin, paris]


@pytest.mark.parametrize("place", ["", "   ", "95,13.4", "x" * 201])
def test_add_location_rejects_bad_input(controller, place):
    with pytest.raises(ValidationError):
        controller.add_location(place)


def test_remove_location_clamps_selection(controller, settings_store):
    controller.add_location("1,1", "One")
    controller.add_location("2,2", "Two")
    controller.select_location(1)

    controller.remove_location(1)

    assert [loc.name for loc in controller.locations()] == ["One"]
    assert settings_store.get("actual-city") == 0
    with pytest.raises(ValidationError):
        controller.remove_location(3)


def test_remove_location_before_selection_keeps_it(controller, settings_store):
    for place, name in (("1,1", "One"), ("2,2", "Two"), ("3,3", "Three")):
        controller.add_location(place, name)
    controller.select_location(1)

    controller.remove_location(0)

    assert settings_store.get("actual-city") == 0
    assert settings_store.active_location().name == "Two"


def test_select_location(controller, settings_store):
    controller.add_location("1,1", "One")
    controller.add_location("2,2", "Two")

    assert controller.select_location(1).name == "Two"
    assert settings_store.active_location().name == "Two"
    with pytest.raises(ValidationError):
        controller.select_location(2)


def test_coordinates_model():
    coords = CoordinatesModel.parse("48.85, 2.35")
    assert (coords.lat, coords.lon) == (48.85, 2.35)
    assert coords.as_place() == "48.85,2.35"

    with pytest.raises(ValidationError):
        CoordinatesModel.parse("1,2,3")
    with pytest.raises(ValidationError):
        CoordinatesModel.parse("10,200")


def test_validate_payload_strips_input():
    payload = validate_payload(LocationInputModel, name="  Home ", place=" here ")
    assert payload.name == "Home"
    assert payload.place == "here"
