from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Tuple


class NameType(str, Enum):
    MY_LOC = "my-loc"
    CUSTOM = "custom"


class PlaceType(str, Enum):
    MY_LOC = "my-loc"
    COORDS = "coords"
    SEARCH = "search"


@dataclass(frozen=True)
class Location:
    name_type: NameType
    name: str
    place_type: PlaceType
    place: str = ""

    def is_my_loc(self) -> bool:
        return self.place_type is PlaceType.MY_LOC

    def display_name(self, translate: Optional[Callable[[str], str]] = None) -> str:
        if self.name_type is NameType.CUSTOM and self.name:
            return self.name
        if self.is_my_loc():
            return translate("My Location") if translate else "My Location"
        return self.name or self.place

    def coordinates(self) -> Optional[Tuple[float, float]]:
        """Parse ``"lat,lon"`` places; ``None`` for anything else."""

        if self.place_type is not PlaceType.COORDS:
            return None
        parts = self.place.replace(" ", "").split(",")
        if len(parts) != 2:
            return None
        try:
            return float(parts[0]), float(parts[1])
        except ValueError:
            return None

    def to_storage(self) -> dict[str, Any]:
        return {
            "name_type": self.name_type.value,
            "name": self.name,
            "place_type": self.place_type.value,
            "place": self.place,
        }

    @classmethod
    def from_storage(cls, data: Mapping[str, Any]) -> Optional["Location"]:
        try:
            name_type = NameType(data.get("name_type", NameType.CUSTOM.value))
            place_type = PlaceType(data.get("place_type", PlaceType.COORDS.value))
        except ValueError:
            return None
        name = str(data.get("name") or "")
        place = str(data.get("place") or "")
        if place_type is not PlaceType.MY_LOC and not place:
            return None
        return cls(name_type=name_type, name=name, place_type=place_type, place=place)
