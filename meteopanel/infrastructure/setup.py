from dataclasses import dataclass
from typing import Optional

import httpx

from ..application.weather_cache import WeatherCache
from ..core.config import PanelConfig, get_config
from ..jobs.refresh import RefreshDependencies, WeatherRefresher
from ..presentation.i18n import Localization
from ..presentation.panel import PanelOptions, PanelPresenter
from ..presentation.preferences import PreferencesController
from ..presentation.units import UnitFormatter
from .external_services import NominatimGeocodeService, OpenMeteoWeatherService
from .locations import LocationService
from .migration import migrate_settings
from .settings_store import JsonSettingsStore


@dataclass
class PanelRuntime:
    config: PanelConfig
    settings: JsonSettingsStore
    localization: Localization
    cache: WeatherCache
    weather_service: OpenMeteoWeatherService
    location_service: LocationService
    refresher: WeatherRefresher

    def translate(self, text: str) -> str:
        return self.localization.gettext(text, self.config.language)

    def location_label(self) -> str:
        return self.settings.active_location().display_name(self.translate)

    def build_presenter(self) -> PanelPresenter:
        """Presenter reflecting the settings as they are right now."""

        settings = self.settings
        formatter = UnitFormatter(settings.unit_preferences(), self.translate)
        options = PanelOptions(
            comment_in_panel=settings.get("show-comment-in-panel"),
            text_in_panel=settings.get("show-text-in-panel"),
            location_length=settings.get("location-text-length"),
        )
        return PanelPresenter(formatter, self.translate, options)

    def preferences(self) -> PreferencesController:
        return PreferencesController(self.settings)


def setup_runtime(
    config: Optional[PanelConfig] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> PanelRuntime:
    """Create and wire every collaborator of the panel."""

    config = config or get_config()
    settings = JsonSettingsStore(config.settings_path)
    migrate_settings(settings)

    localization = Localization()
    cache = WeatherCache()
    weather_service = OpenMeteoWeatherService(
        http_client=http_client,
        api_url=config.weather_api_url,
        timeout=config.http_timeout,
    )
    location_service = LocationService(
        NominatimGeocodeService(
            http_client=http_client,
            api_url=config.geocode_api_url,
            timeout=config.http_timeout,
        ),
        fallback=(config.fallback_latitude, config.fallback_longitude),
    )
    refresher = WeatherRefresher(
        RefreshDependencies(
            weather_service=weather_service,
            coordinates_provider=location_service,
            settings=settings,
            cache=cache,
            translate=localization.translator(config.language),
            failure_backoff_sec=config.failure_backoff_sec,
        )
    )
    settings.connect(lambda _key: refresher.request_refresh())

    return PanelRuntime(
        config=config,
        settings=settings,
        localization=localization,
        cache=cache,
        weather_service=weather_service,
        location_service=location_service,
        refresher=refresher,
    )
