import asyncio
import inspect
from datetime import datetime, timedelta

import pytest

from meteopanel.core.config import reset_config_provider
from meteopanel.infrastructure.settings_store import JsonSettingsStore

FIRST_HOUR = datetime(2026, 3, 10, 0, 0)


def pytest_pyfunc_call(pyfuncitem):
    if inspect.iscoroutinefunction(pyfuncitem.obj):
        funcargs = {
            name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames
        }
        asyncio.run(pyfuncitem.obj(**funcargs))
        return True
    return None


@pytest.fixture(autouse=True)
def _config_scope():

    yield
    reset_config_provider()


def _hourly_block(hours: int) -> dict:
    times = [
        (FIRST_HOUR + timedelta(hours=i)).strftime("%Y-%m-%dT%H:%M")
        for i in range(hours)
    ]
    return {
        "time": times,
        "temperature_2m": [round(5.0 + (i % 24) * 0.5, 1) for i in range(hours)],
        "apparent_temperature": [4.0] * hours,
        "relative_humidity_2m": [70] * hours,
        "surface_pressure": [1015.0] * hours,
        "wind_speed_10m": [3.0] * hours,
        "wind_direction_10m": [90] * hours,
        "wind_gusts_10m": [6.0] * hours,
        "weather_code": [0] * hours,
        "precipitation_probability": [0] * hours,
        "precipitation": [0.0] * hours,
        "rain": [0.0] * hours,
        "showers": [0.0] * hours,
        "snowfall": [0.0] * hours,
    }


@pytest.fixture
def make_payload():
    """Factory for Open-Meteo style payloads starting at 2026-03-10 00:00.

    ``hourly`` entries override whole series; ``hour_values`` patches single
    indices as ``{(series, index): value}``.
    """

    def factory(
        hours: int = 48,
        timezone_name: str = "UTC",
        utc_offset_seconds: int = 0,
        current=None,
        hourly=None,
        hour_values=None,
    ) -> dict:
        hourly_block = _hourly_block(hours)
        hourly_block.update(hourly or {})
        for (series, index), value in (hour_values or {}).items():
            hourly_block[series][index] = value

        current_block = {
            "time": "2026-03-10T10:15",
            "temperature_2m": 12.3,
            "apparent_temperature": 11.0,
            "relative_humidity_2m": 65,
            "surface_pressure": 1013.0,
            "wind_speed_10m": 4.2,
            "wind_direction_10m": 225,
            "wind_gusts_10m": 9.1,
            "weather_code": 2,
        }
        if current is not None:
            current_block.update(current)

        return {
            "latitude": 52.52,
            "longitude": 13.41,
            "timezone": timezone_name,
            "utc_offset_seconds": utc_offset_seconds,
            "current": current_block,
            "hourly": hourly_block,
            "daily": {
                "time": ["2026-03-10"],
                "sunrise": ["2026-03-10T06:30"],
                "sunset": ["2026-03-10T18:15"],
            },
        }

    return factory


@pytest.fixture
def settings_store(tmp_path) -> JsonSettingsStore:

    return JsonSettingsStore(str(tmp_path / "settings.json"))
