from meteopanel.domain.locations import Location, NameType, PlaceType
from meteopanel.infrastructure.migration import (
    migrate_settings,
    parse_legacy_cities,
)
from meteopanel.infrastructure.settings_store import SCHEMA_VERSION

BERLIN = Location(NameType.CUSTOM, "Berlin", PlaceType.COORDS, "52.52,13.41")


def test_parse_legacy_cities():
    locations = parse_legacy_cities(" 52.52, 13.41 >Berlin && here>")

    assert locations == [
        BERLIN,
        Location(NameType.MY_LOC, "", PlaceType.MY_LOC, ""),
    ]


def test_parse_legacy_named_my_location():
    (location,) = parse_legacy_cities("here>Home")
    assert location.is_my_loc()
    assert location.name_type is NameType.CUSTOM
    assert location.name == "Home"


def test_parse_legacy_cities_skips_empty_sections():
    assert parse_legacy_cities("") == []
    assert parse_legacy_cities(" && >Nowhere") == []


def test_fresh_store_only_records_schema_version(settings_store):
    assert migrate_settings(settings_store) is False
    assert settings_store.get("schema-version") == SCHEMA_VERSION


def test_legacy_city_string_becomes_locations(settings_store):
    settings_store.set("city", "52.52,13.41>Berlin && here>")

    assert migrate_settings(settings_store) is True

    assert settings_store.locations()[0] == BERLIN
    assert settings_store.locations()[1].is_my_loc()
    assert settings_store.get("city") == ""
    assert not settings_store.is_set("city")


def test_hpa_becomes_mbar(settings_store):
    settings_store.set("pressure-unit", "hpa")

    assert migrate_settings(settings_store) is True
    assert settings_store.get("pressure-unit") == "mbar"


def test_selected_index_is_clamped(settings_store):
    settings_store.set_locations([BERLIN, BERLIN])
    settings_store.set("actual-city", 5)

    migrate_settings(settings_store)

    assert settings_store.get("actual-city") == 1


def test_geocode_provider_is_replaced(settings_store):
    settings_store.set("geolocation-provider", "geocode")

    assert migrate_settings(settings_store) is True
    assert settings_store.get("geolocation-provider") == "openstreetmaps"


def test_current_schema_is_left_alone(settings_store):
    settings_store.set("schema-version", SCHEMA_VERSION)
    settings_store.set("pressure-unit", "hpa")

    assert migrate_settings(settings_store) is False
    assert settings_store.get("pressure-unit") == "hpa"
