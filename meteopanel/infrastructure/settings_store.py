"""JSON backed settings store with schema defaults and range checks."""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from ..core.exceptions import StorageError, ValidationError
from ..domain.locations import Location, NameType, PlaceType
from ..domain.units import (
    ClockFormat,
    PressureUnit,
    TemperatureUnit,
    UnitPreferences,
    WindSpeedUnit,
)

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 130


@dataclass(frozen=True)
class SettingSpec:
    default: Any
    kind: type
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    choices: Optional[Tuple[str, ...]] = None

    def validate(self, key: str, value: Any) -> Any:
        if self.kind is bool:
            if not isinstance(value, bool):
                raise ValidationError(f"Setting '{key}' expects a boolean")
            return value
        if self.kind in (int, float):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValidationError(f"Setting '{key}' expects a number")
            if self.minimum is not None and value < self.minimum:
                raise ValidationError(f"Setting '{key}' below {self.minimum}")
            if self.maximum is not None and value > self.maximum:
                raise ValidationError(f"Setting '{key}' above {self.maximum}")
            return self.kind(value)
        if self.kind is list:
            if not isinstance(value, list):
                raise ValidationError(f"Setting '{key}' expects a list")
            return list(value)
        if not isinstance(value, str):
            raise ValidationError(f"Setting '{key}' expects a string")
        if self.choices is not None and value not in self.choices:
            raise ValidationError(
                f"Setting '{key}' must be one of {', '.join(self.choices)}"
            )
        return value


def _enum_choices(enum_type) -> Tuple[str, ...]:
    return tuple(member.value for member in enum_type)


SETTINGS_SCHEMA: Dict[str, SettingSpec] = {
    "schema-version": SettingSpec(0, int, minimum=0),
    "locs": SettingSpec([], list),
    "actual-city": SettingSpec(0, int, minimum=0),
    "city": SettingSpec("", str),
    "days-forecast": SettingSpec(2, int, minimum=0, maximum=7),
    "refresh-interval-current": SettingSpec(600, int, minimum=600, maximum=86400),
    "refresh-interval-forecast": SettingSpec(3600, int, minimum=1800, maximum=86400),
    "loc-refresh-interval": SettingSpec(30.0, float, minimum=10, maximum=1440),
    "disable-forecast": SettingSpec(False, bool),
    "use-system-icons": SettingSpec(True, bool),
    "delay-ext-init": SettingSpec(5, int, minimum=0, maximum=30),
    "unit": SettingSpec(
        TemperatureUnit.CELSIUS.value, str, choices=_enum_choices(TemperatureUnit)
    ),
    "wind-speed-unit": SettingSpec(
        WindSpeedUnit.KPH.value, str, choices=_enum_choices(WindSpeedUnit)
    ),
    "pressure-unit": SettingSpec(
        PressureUnit.MBAR.value, str, choices=_enum_choices(PressureUnit)
    ),
    "clock-format": SettingSpec(
        ClockFormat.H24.value, str, choices=_enum_choices(ClockFormat)
    ),
    "simplify-degrees": SettingSpec(False, bool),
    "decimal-places": SettingSpec(1, int, minimum=0, maximum=3),
    "translate-condition": SettingSpec(True, bool),
    "show-comment-in-panel": SettingSpec(False, bool),
    "show-text-in-panel": SettingSpec(True, bool),
    "location-text-length": SettingSpec(0, int, minimum=0, maximum=500),
    "geolocation-provider": SettingSpec(
        "openstreetmaps", str, choices=("openstreetmaps", "geocode")
    ),
    "precip-starts-notif": SettingSpec(False, bool),
    "prefs-default-width": SettingSpec(700, int, minimum=0),
    "prefs-default-height": SettingSpec(600, int, minimum=0),
    "frozen": SettingSpec(False, bool),
}


class JsonSettingsStore:
    """Key/value settings persisted as a single JSON document.

    Keys and defaults follow :data:`SETTINGS_SCHEMA`. Only values that differ
    from their default are written, so resetting a key removes it from disk.
    """

    def __init__(self, storage_path: str = "settings.json") -> None:
        self.storage_path = Path(storage_path)
        self._lock = threading.RLock()
        self._values: Dict[str, Any] = {}
        self._loaded = False
        self._listeners: List[Callable[[str], None]] = []

    def _ensure_loaded(self) -> None:
        with self._lock:
            if self._loaded:
                return
            try:
                if (
                    not self.storage_path.exists()
                    or self.storage_path.stat().st_size == 0
                ):
                    self._values = {}
                else:
                    with self.storage_path.open("r", encoding="utf-8") as f:
                        data = json.load(f)
                    self._values = data if isinstance(data, dict) else {}
            except json.JSONDecodeError:
                logger.warning(
                    "%s empty or corrupted, starting with default settings",
                    self.storage_path,
                )
                self._values = {}
            except OSError as e:
                logger.exception("Failed to read %s", self.storage_path)
                raise StorageError(f"Could not load settings: {e}") from e
            self._loaded = True

    def _save(self) -> None:
        with self._lock:
            try:
                self.storage_path.parent.mkdir(parents=True, exist_ok=True)
                tmp_path = self.storage_path.with_suffix(".tmp")
                with tmp_path.open("w", encoding="utf-8") as f:
                    json.dump(self._values, f, ensure_ascii=False, indent=2)
                tmp_path.replace(self.storage_path)
            except OSError as e:
                logger.exception("Failed to save %s", self.storage_path)
                raise StorageError(f"Could not save settings: {e}") from e

    @staticmethod
    def _spec(key: str) -> SettingSpec:
        try:
            return SETTINGS_SCHEMA[key]
        except KeyError:
            raise ValidationError(f"Unknown setting '{key}'") from None

    def connect(self, callback: Callable[[str], None]) -> None:
        """Register ``callback(key)`` for every changed key."""

        self._listeners.append(callback)

    def _notify(self, key: str) -> None:
        if self._values.get("frozen"):
            return
        for callback in list(self._listeners):
            callback(key)

    def list_keys(self) -> List[str]:
        return list(SETTINGS_SCHEMA)

    def get(self, key: str) -> Any:
        spec = self._spec(key)
        self._ensure_loaded()
        with self._lock:
            if key not in self._values:
                if isinstance(spec.default, list):
                    return list(spec.default)
                return spec.default
            try:
                return spec.validate(key, self._values[key])
            except ValidationError:
                logger.warning("Ignoring invalid stored value for '%s'", key)
                return spec.default

    def set(self, key: str, value: Any) -> None:
        spec = self._spec(key)
        value = spec.validate(key, value)
        self._ensure_loaded()
        with self._lock:
            if value == spec.default:
                self._values.pop(key, None)
            else:
                self._values[key] = value
            self._save()
        self._notify(key)

    def reset(self, key: str) -> None:
        self._spec(key)
        self._ensure_loaded()
        with self._lock:
            removed = self._values.pop(key, None)
            if removed is not None:
                self._save()
        if removed is not None:
            self._notify(key)

    def reset_all(self) -> None:
        """Restore defaults; listeners hear a single ``"*"`` notification."""

        self._ensure_loaded()
        with self._lock:
            version = self._values.get("schema-version")
            self._values = {} if version is None else {"schema-version": version}
            self._save()
        self._notify("*")

    def is_set(self, key: str) -> bool:
        self._spec(key)
        self._ensure_loaded()
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(SETTINGS_SCHEMA)

    def as_dict(self) -> Dict[str, Any]:
        return {key: self.get(key) for key in SETTINGS_SCHEMA}

    def locations(self) -> List[Location]:
        locs = []
        for raw in self.get("locs"):
            if isinstance(raw, Mapping):
                loc = Location.from_storage(raw)
                if loc is not None:
                    locs.append(loc)
        return locs

    def set_locations(self, locations: List[Location]) -> None:
        self.set("locs", [loc.to_storage() for loc in locations])

    def active_location(self) -> Location:
        """Selected location; the my-location entry when none is stored."""

        locs = self.locations()
        if not locs:
            return Location(NameType.MY_LOC, "", PlaceType.MY_LOC)
        index = min(max(self.get("actual-city"), 0), len(locs) - 1)
        return locs[index]

    def forecast_days(self) -> int:
        if self.get("disable-forecast"):
            return 0
        return self.get("days-forecast")

    def unit_preferences(self) -> UnitPreferences:
        return UnitPreferences(
            temperature=TemperatureUnit(self.get("unit")),
            wind_speed=WindSpeedUnit(self.get("wind-speed-unit")),
            pressure=PressureUnit(self.get("pressure-unit")),
            clock_format=ClockFormat(self.get("clock-format")),
            simplify_degrees=self.get("simplify-degrees"),
            decimal_places=self.get("decimal-places"),
        )
