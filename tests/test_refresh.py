import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import httpx
import pytest

from meteopanel.application.weather_cache import WeatherCache
from meteopanel.core.exceptions import GeocodeServiceError, WeatherServiceError
from meteopanel.domain.open_meteo import build_weather
from meteopanel.infrastructure.external_services import OpenMeteoWeatherService
from meteopanel.jobs.refresh import RefreshDependencies, WeatherRefresher

FETCHED_AT = datetime(2026, 3, 10, 10, 20, tzinfo=timezone.utc)


def translate(text: str) -> str:
    return text.upper()


@pytest.fixture
def weather(make_payload):
    return build_weather(make_payload(), 2, translate, now=FETCHED_AT)


def make_refresher(settings_store, weather_service, **overrides):
    coordinates_provider = AsyncMock()
    coordinates_provider.get_coords.return_value = (52.52, 13.41)
    deps = RefreshDependencies(
        weather_service=weather_service,
        coordinates_provider=coordinates_provider,
        settings=settings_store,
        cache=WeatherCache(),
        translate=translate,
        clock=lambda: FETCHED_AT,
    )
    for name, value in overrides.items():
        setattr(deps, name, value)
    return WeatherRefresher(deps), deps


@pytest.mark.asyncio
async def test_successful_refresh_updates_cache_and_listeners(settings_store, weather):
    weather_service = AsyncMock()
    weather_service.fetch_weather.return_value = weather
    listener = AsyncMock()
    refresher, deps = make_refresher(settings_store, weather_service)
    refresher.add_listener(listener)

    delay = await refresher.refresh_once()

    assert delay == 600
    weather_service.fetch_weather.assert_awaited_once_with(
        (52.52, 13.41), 2, translate
    )
    assert deps.cache.current is weather
    assert deps.cache.entry.fetched_at == FETCHED_AT
    listener.assert_awaited_once_with(deps.cache.entry)


@pytest.mark.asyncio
async def test_refresh_interval_comes_from_settings(settings_store, weather):
    settings_store.set("refresh-interval-current", 1800)
    weather_service = AsyncMock()
    weather_service.fetch_weather.return_value = weather
    refresher, _ = make_refresher(settings_store, weather_service)

    assert await refresher.refresh_once() == 1800


@pytest.mark.asyncio
async def test_condition_translation_can_be_disabled(settings_store, weather):
    settings_store.set("translate-condition", False)
    settings_store.set("disable-forecast", True)
    weather_service = AsyncMock()
    weather_service.fetch_weather.return_value = weather
    refresher, _ = make_refresher(settings_store, weather_service)

    await refresher.refresh_once()

    weather_service.fetch_weather.assert_awaited_once_with((52.52, 13.41), 0, None)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        WeatherServiceError("upstream down"),
        httpx.ReadTimeout("slow"),
    ],
)
async def test_failed_fetch_keeps_previous_snapshot(settings_store, weather, error):
    weather_service = AsyncMock()
    weather_service.fetch_weather.side_effect = error
    listener = AsyncMock()
    refresher, deps = make_refresher(
        settings_store, weather_service, failure_backoff_sec=120
    )
    refresher.add_listener(listener)
    previous = deps.cache.replace(weather, FETCHED_AT)

    delay = await refresher.refresh_once()

    assert delay == 120
    assert deps.cache.entry is previous
    listener.assert_not_awaited()


@pytest.mark.asyncio
async def test_soft_failure_uses_backoff(settings_store):
    weather_service = AsyncMock()
    weather_service.fetch_weather.return_value = None
    refresher, deps = make_refresher(settings_store, weather_service)

    assert await refresher.refresh_once() == 600
    assert deps.cache.entry is None


@pytest.mark.asyncio
async def test_location_failure_skips_fetch(settings_store):
    weather_service = AsyncMock()
    refresher, deps = make_refresher(settings_store, weather_service)
    deps.coordinates_provider.get_coords.side_effect = GeocodeServiceError("nope")

    assert await refresher.refresh_once() == 600
    weather_service.fetch_weather.assert_not_awaited()


@pytest.mark.asyncio
async def test_failing_listener_does_not_break_refresh(settings_store, weather):
    weather_service = AsyncMock()
    weather_service.fetch_weather.return_value = weather
    refresher, deps = make_refresher(settings_store, weather_service)
    broken = AsyncMock(side_effect=RuntimeError("widget gone"))
    healthy = AsyncMock()
    refresher.add_listener(broken)
    refresher.add_listener(healthy)

    assert await refresher.refresh_once() == 600
    healthy.assert_awaited_once()
    assert deps.cache.current is weather


@pytest.mark.asyncio
async def test_run_stops_after_requested(settings_store, weather):
    weather_service = AsyncMock()
    weather_service.fetch_weather.return_value = weather
    refresher, _ = make_refresher(settings_store, weather_service)

    async def stop_after_first(entry):
        refresher.stop()

    refresher.add_listener(stop_after_first)
    await asyncio.wait_for(refresher.run(startup_delay=0), timeout=5)

    assert weather_service.fetch_weather.await_count == 1


@pytest.mark.asyncio
async def test_request_refresh_cuts_wait_short(settings_store, weather):
    weather_service = AsyncMock()
    weather_service.fetch_weather.return_value = weather
    refresher, _ = make_refresher(settings_store, weather_service)
    calls = []

    async def listener(entry):
        calls.append(entry)
        if len(calls) == 1:
            refresher.request_refresh()
        else:
            refresher.stop()

    refresher.add_listener(listener)
    await asyncio.wait_for(refresher.run(startup_delay=0), timeout=5)

    assert weather_service.fetch_weather.await_count == 2


@pytest.mark.asyncio
async def test_startup_delay_can_be_interrupted(settings_store, weather):
    settings_store.set("delay-ext-init", 30)
    weather_service = AsyncMock()
    weather_service.fetch_weather.return_value = weather
    refresher, _ = make_refresher(settings_store, weather_service)

    async def stop_after_first(entry):
        refresher.stop()

    refresher.add_listener(stop_after_first)
    refresher.request_refresh()
    await asyncio.wait_for(refresher.run(), timeout=5)

    assert weather_service.fetch_weather.await_count == 1


@pytest.mark.asyncio
async def test_unexpected_error_uses_backoff(settings_store):
    weather_service = AsyncMock()
    weather_service.fetch_weather.side_effect = AttributeError("no get")
    refresher, deps = make_refresher(settings_store, weather_service)

    assert await refresher.refresh_once() == 600
    assert deps.cache.entry is None


@pytest.mark.asyncio
@pytest.mark.parametrize("daily", [["2026-03-10T06:30"], "oops"])
async def test_malformed_daily_block_reschedules(settings_store, make_payload, daily):
    payload = make_payload()
    payload["daily"] = daily

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=payload)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        service = OpenMeteoWeatherService(client, api_url="https://example.test/v1")
        refresher, deps = make_refresher(
            settings_store, service, failure_backoff_sec=120
        )

        assert await refresher.refresh_once() == 120
    assert deps.cache.entry is None


@pytest.mark.asyncio
async def test_out_of_range_offset_still_refreshes(settings_store, make_payload):
    payload = make_payload(timezone_name="", utc_offset_seconds=90000)

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=payload)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        service = OpenMeteoWeatherService(client, api_url="https://example.test/v1")
        refresher, deps = make_refresher(
            settings_store, service, failure_backoff_sec=120
        )

        assert await refresher.refresh_once() == 600
    assert deps.cache.current.sunrise.utcoffset().total_seconds() == 0
