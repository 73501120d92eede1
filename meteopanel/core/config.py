import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError

load_dotenv()

DEFAULT_WEATHER_API_URL = "https://api.open-meteo.com/v1/forecast"
DEFAULT_GEOCODE_API_URL = "https://nominatim.openstreetmap.org/search"


@dataclass
class PanelConfig:

    settings_path: str = "data/settings.json"
    language: str = "en"
    fallback_latitude: float = 0.0
    fallback_longitude: float = 0.0
    log_level: str = "INFO"
    weather_api_url: str = DEFAULT_WEATHER_API_URL
    geocode_api_url: str = DEFAULT_GEOCODE_API_URL
    http_timeout: float = 10.0
    failure_backoff_sec: int = 600

    @classmethod
    def from_env(cls) -> "PanelConfig":

        try:
            fallback_latitude = float(os.getenv("FALLBACK_LATITUDE", "0"))
            fallback_longitude = float(os.getenv("FALLBACK_LONGITUDE", "0"))
        except ValueError:
            raise ConfigurationError(
                "Invalid FALLBACK_LATITUDE/FALLBACK_LONGITUDE in .env file"
            )
        if not (-90 <= fallback_latitude <= 90) or not (
            -180 <= fallback_longitude <= 180
        ):
            raise ConfigurationError("Fallback coordinates out of range")

        try:
            http_timeout = float(os.getenv("HTTP_TIMEOUT", "10"))
            failure_backoff_sec = int(os.getenv("FAILURE_BACKOFF_SEC", "600"))
        except ValueError:
            raise ConfigurationError("Invalid HTTP_TIMEOUT or FAILURE_BACKOFF_SEC")

        log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        if log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ConfigurationError(f"Unknown LOG_LEVEL '{log_level}'")

        return cls(
            settings_path=os.getenv("SETTINGS_PATH", "data/settings.json"),
            language=os.getenv("PANEL_LANGUAGE", "en").lower(),
            fallback_latitude=fallback_latitude,
            fallback_longitude=fallback_longitude,
            log_level=log_level,
            weather_api_url=os.getenv("WEATHER_API_URL", DEFAULT_WEATHER_API_URL),
            geocode_api_url=os.getenv("GEOCODE_API_URL", DEFAULT_GEOCODE_API_URL),
            http_timeout=http_timeout,
            failure_backoff_sec=failure_backoff_sec,
        )


class ConfigProvider(ABC):

    @abstractmethod
    def get(self) -> PanelConfig:

        raise NotImplementedError


class EnvConfigProvider(ConfigProvider):

    def __init__(self) -> None:

        self._config: Optional[PanelConfig] = None

    def get(self) -> PanelConfig:

        if self._config is None:
            self._config = PanelConfig.from_env()
        return self._config

    def reset(self) -> None:

        self._config = None


class StaticConfigProvider(ConfigProvider):

    def __init__(self, config: PanelConfig) -> None:

        self._config = config

    def get(self) -> PanelConfig:

        return self._config


_config_provider: ConfigProvider = EnvConfigProvider()


def get_config_provider() -> ConfigProvider:

    return _config_provider


def set_config_provider(provider: ConfigProvider) -> None:

    global _config_provider
    _config_provider = provider


def reset_config_provider() -> None:

    set_config_provider(EnvConfigProvider())


def get_config() -> PanelConfig:

    return _config_provider.get()


def set_config(config_instance: PanelConfig) -> None:

    set_config_provider(StaticConfigProvider(config_instance))
