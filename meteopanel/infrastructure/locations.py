import logging
from typing import Dict, Optional

from ..core.exceptions import GeocodeServiceError, ValidationError
from ..domain.locations import Location, PlaceType
from ..domain.services import Coordinates, CoordinatesProvider, GeocodeService
from .settings_store import JsonSettingsStore

logger = logging.getLogger(__name__)


def validate_coordinates(lat: float, lon: float) -> Coordinates:

    if not (-90 <= lat <= 90):
        raise ValidationError(f"Invalid latitude: {lat}")
    if not (-180 <= lon <= 180):
        raise ValidationError(f"Invalid longitude: {lon}")
    return lat, lon


class LocationService(CoordinatesProvider):
    """Resolve the active location of a settings store to coordinates."""

    def __init__(
        self,
        geocode_service: Optional[GeocodeService],
        fallback: Coordinates = (0.0, 0.0),
    ) -> None:

        self._geocode_service = geocode_service
        self._fallback = fallback
        self._search_cache: Dict[str, Coordinates] = {}

    async def resolve(self, location: Location) -> Coordinates:

        if location.place_type is PlaceType.MY_LOC:
            return validate_coordinates(*self._fallback)

        if location.place_type is PlaceType.COORDS:
            coords = location.coordinates()
            if coords is None:
                raise ValidationError(f"Invalid coordinates '{location.place}'")
            return validate_coordinates(*coords)

        query = location.place.strip()
        if query in self._search_cache:
            return self._search_cache[query]
        if self._geocode_service is None:
            raise GeocodeServiceError("No geocoding service configured")
        result = await self._geocode_service.geocode_city(query)
        if not result:
            raise GeocodeServiceError(f"Place '{query}' not found")
        lat, lon, label = result
        coords = validate_coordinates(lat, lon)
        logger.info("Place geocoded %s: %s", query, label or query)
        self._search_cache[query] = coords
        return coords

    async def get_coords(self, settings: JsonSettingsStore) -> Coordinates:

        return await self.resolve(settings.active_location())
