"""Upgrade settings written by older releases to the current layout."""

import logging
from typing import List

from ..domain.locations import Location, NameType, PlaceType
from .settings_store import SCHEMA_VERSION, JsonSettingsStore

logger = logging.getLogger(__name__)

LEGACY_CITY_SEPARATOR = " && "
LEGACY_NAME_SEPARATOR = ">"
LEGACY_MY_LOC = "here"


def parse_legacy_cities(city: str) -> List[Location]:
    """Parse the pre-1.28 ``"lat,lon>Name && here>"`` city string."""

    locations: List[Location] = []
    for section in city.split(LEGACY_CITY_SEPARATOR):
        place, _, name = section.partition(LEGACY_NAME_SEPARATOR)
        place = "".join(place.split())
        if not place:
            continue
        is_my_loc = place == LEGACY_MY_LOC
        locations.append(
            Location(
                name_type=(
                    NameType.MY_LOC if is_my_loc and not name else NameType.CUSTOM
                ),
                name=name,
                place_type=PlaceType.MY_LOC if is_my_loc else PlaceType.COORDS,
                place="" if is_my_loc else place,
            )
        )
    return locations


def migrate_pre_128(store: JsonSettingsStore) -> bool:

    city = store.get("city")
    if not city:
        return False

    store.reset("city")
    store.set_locations(parse_legacy_cities(city))
    logger.info("Migrated legacy cities to locations")
    return True


def migrate_pre_130(store: JsonSettingsStore) -> bool:

    changed = False
    if store.get("pressure-unit") == "hpa":
        store.set("pressure-unit", "mbar")
        changed = True

    count = len(store.locations())
    selected = store.get("actual-city")
    if count and selected >= count:
        store.set("actual-city", count - 1)
        changed = True
    return changed


def migrate_providers(store: JsonSettingsStore) -> bool:

    if store.get("geolocation-provider") == "geocode":
        store.set("geolocation-provider", "openstreetmaps")
        return True
    return False


def migrate_settings(store: JsonSettingsStore) -> bool:
    """Run every migration step; returns True when anything changed."""

    if store.get("schema-version") >= SCHEMA_VERSION:
        return False

    changed = migrate_pre_128(store)
    changed = migrate_pre_130(store) or changed
    changed = migrate_providers(store) or changed
    store.set("schema-version", SCHEMA_VERSION)
    if changed:
        logger.info("Settings migrated to schema %s", SCHEMA_VERSION)
    return changed
