"""Application entrypoint: keep the weather panel refreshed in a terminal."""

from __future__ import annotations

import asyncio
import logging
import sys

from meteopanel import __version__
from meteopanel.application.weather_cache import CachedWeather
from meteopanel.core.config import get_config
from meteopanel.core.exceptions import ConfigurationError, PanelError
from meteopanel.infrastructure.setup import PanelRuntime, setup_runtime
from meteopanel.observability.logging import configure_logging

logger = logging.getLogger(__name__)


def _printer(runtime: PanelRuntime):

    async def _print_weather(entry: CachedWeather) -> None:
        presenter = runtime.build_presenter()
        now = entry.fetched_at.astimezone(entry.weather.sunrise.tzinfo)
        try:
            report = presenter.render_text(
                entry.weather,
                runtime.location_label(),
                now,
                forecast_days=runtime.settings.forecast_days(),
                forecast_disabled=runtime.settings.get("disable-forecast"),
            )
        except PanelError:
            logger.exception("Failed to render weather")
            return
        sys.stdout.write(report + "\n\n")
        sys.stdout.flush()

    return _print_weather


def main() -> None:
    """Load configuration, migrate settings and run the refresh loop."""

    try:
        config = get_config()
        configure_logging(config.log_level)
        runtime = setup_runtime(config)
        runtime.refresher.add_listener(_printer(runtime))

        logger.info("meteopanel v%s started", __version__)
        try:
            asyncio.run(runtime.refresher.run())
        except KeyboardInterrupt:
            logger.info("meteopanel stopped by user")
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        raise
    except Exception:
        logger.exception("meteopanel startup error")
        raise


if __name__ == "__main__":
    main()
