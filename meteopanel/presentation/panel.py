"""Push weather snapshots into panel widgets.

Widgets are owned by the host shell. Anything with a ``text`` attribute is a
label, anything with ``set_icon(name)`` an icon, and anything with
``show()``/``hide()`` a box; no other widget API is used.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional, Protocol, Sequence

from meteopanel.core.exceptions import InvalidValueError, WeatherDataError
from meteopanel.domain.selection import select_window
from meteopanel.domain.weather import ForecastEntry, WeatherSnapshot
from meteopanel.presentation.units import UnitFormatter

MISSING = "—"
REFRESH_ICON = "view-refresh-symbolic"
SUNRISE_ICON = "daytime-sunrise-symbolic"
SUNSET_ICON = "daytime-sunset-symbolic"
WEEKDAYS = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


class Label(Protocol):
    text: str


class Icon(Protocol):
    def set_icon(self, name: str) -> None: ...


class Box(Protocol):
    def show(self) -> None: ...

    def hide(self) -> None: ...


@dataclass
class CurrentWidgets:
    panel_icon: Icon
    panel_info: Label
    icon: Icon
    summary: Label
    sun_icon: Icon
    sun_info: Label
    sunrise: Label
    sunset: Label
    build: Label
    location: Optional[Label] = None
    feels_like: Optional[Label] = None
    humidity: Optional[Label] = None
    pressure: Optional[Label] = None
    wind: Optional[Label] = None
    gusts: Optional[Label] = None
    gusts_box: Optional[Box] = None


@dataclass
class HourWidgets:
    time: Label
    icon: Icon
    temperature: Label
    summary: Label
    precip_box: Box
    precip_text: Label


@dataclass
class DayWidgets:
    day: Label
    hours: List[HourWidgets] = field(default_factory=list)


@dataclass(frozen=True)
class PanelOptions:
    comment_in_panel: bool = False
    text_in_panel: bool = True
    location_length: int = 0


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def precipitation_text(weather: WeatherSnapshot) -> str:
    """``"<symbol> <pop>% <amount> mm"`` or ``""`` when nothing is expected."""

    symbol = weather.precipitation_symbol()
    if symbol is None:
        return ""
    parts = []
    if weather.precipitation_probability is not None:
        parts.append(f"{_round_half_up(weather.precipitation_probability)}%")
    if weather.precipitation is not None:
        parts.append(f"{weather.precipitation:.1f} mm")
    return f"{symbol} {' '.join(parts)}"


def truncate_location(location: str, max_length: int) -> str:

    if max_length and len(location) > max_length:
        return location[: max(max_length - 3, 0)] + "..."
    return location


def next_sun_event(weather: WeatherSnapshot, now: datetime) -> tuple[str, datetime]:
    """Sunset while the sun is up, sunrise otherwise."""

    if weather.sunrise <= now < weather.sunset:
        return SUNSET_ICON, weather.sunset
    return SUNRISE_ICON, weather.sunrise


class PanelPresenter:
    """Formats snapshots and writes the strings into widget handles."""

    def __init__(
        self,
        formatter: UnitFormatter,
        translate: Optional[Callable[[str], str]] = None,
        options: Optional[PanelOptions] = None,
    ) -> None:
        self.formatter = formatter
        self._ = translate or (lambda text: text)
        self.options = options or PanelOptions()

    def _display(self, render: Callable[[UnitFormatter], str]) -> str:
        try:
            return render(self.formatter)
        except InvalidValueError:
            return MISSING

    def day_title(self, index: int, first: ForecastEntry) -> str:
        if index == 0:
            return self._("Today")
        if index == 1:
            return self._("Tomorrow")
        return self._(WEEKDAYS[first.start.weekday()])

    def populate_current(
        self,
        weather: WeatherSnapshot,
        widgets: CurrentWidgets,
        location: str,
        now: datetime,
    ) -> None:

        widgets.panel_icon.set_icon(weather.icon_name)
        widgets.icon.set_icon(weather.icon_name)

        sun_icon, sun_time = next_sun_event(weather, now)
        widgets.sun_icon.set_icon(sun_icon)
        widgets.sun_info.text = self.formatter.format_time(sun_time)

        condition = weather.condition
        temperature = self._display(weather.display_temperature)
        info_condition = condition if self.options.comment_in_panel else ""
        info_temperature = temperature if self.options.text_in_panel else ""
        separator = self._(", ") if info_condition and info_temperature else ""
        widgets.panel_info.text = info_condition + separator + info_temperature
        widgets.summary.text = (
            f"{condition}, {temperature}" if condition else temperature
        )

        widgets.sunrise.text = weather.display_sunrise(self.formatter)
        widgets.sunset.text = weather.display_sunset(self.formatter)
        widgets.build.text = self.formatter.format_time(now)

        if widgets.location is not None:
            widgets.location.text = truncate_location(
                location, self.options.location_length
            )
        if widgets.feels_like is not None:
            widgets.feels_like.text = self._display(weather.display_feels_like)
        if widgets.humidity is not None:
            widgets.humidity.text = self._display(weather.display_humidity)
        if widgets.pressure is not None:
            widgets.pressure.text = self._display(weather.display_pressure)
        if widgets.wind is not None:
            widgets.wind.text = self._display(weather.display_wind)
        if widgets.gusts is not None:
            available = weather.gusts_available()
            if widgets.gusts_box is not None:
                if available:
                    widgets.gusts_box.show()
                else:
                    widgets.gusts_box.hide()
            if available:
                widgets.gusts.text = self._display(weather.display_gusts)

    def _populate_hour(self, entry: ForecastEntry, widgets: HourWidgets) -> None:
        weather = entry.weather
        widgets.time.text = entry.display_time(self.formatter)
        widgets.icon.set_icon(weather.icon_name)
        widgets.temperature.text = self._display(weather.display_temperature)
        widgets.summary.text = weather.condition

        text = precipitation_text(weather)
        widgets.precip_box.hide()
        widgets.precip_text.text = text
        if text:
            widgets.precip_box.show()

    @staticmethod
    def _blank_hour(widgets: HourWidgets) -> None:
        widgets.time.text = ""
        widgets.icon.set_icon(REFRESH_ICON)
        widgets.temperature.text = ""
        widgets.summary.text = ""
        widgets.precip_box.hide()
        widgets.precip_text.text = ""

    def populate_today(
        self,
        weather: WeatherSnapshot,
        slots: Sequence[Optional[HourWidgets]],
        now: datetime,
    ) -> List[ForecastEntry]:
        """Fill the compact strip; returns the entries that were shown."""

        if not weather.has_forecast:
            raise WeatherDataError("Snapshot has no forecast")
        items = select_window(weather.forecast, now, size=len(slots))
        for index, widgets in enumerate(slots):
            if widgets is None:
                continue
            if index >= len(items):
                self._blank_hour(widgets)
            else:
                self._populate_hour(items[index], widgets)
        return items

    def populate_forecast(
        self,
        weather: WeatherSnapshot,
        days: Sequence[DayWidgets],
        forecast_days: int,
    ) -> int:
        """Fill the day columns; returns the number of days filled."""

        if not weather.has_forecast:
            raise WeatherDataError("Snapshot has no forecast")
        grid = weather.forecast
        day_count = min(forecast_days, len(grid), len(days))
        for index in range(day_count):
            entries = grid.day(index)
            widgets = days[index]
            if entries:
                widgets.day.text = self.day_title(index, entries[0])
            for entry, hour_widgets in zip(entries, widgets.hours):
                self._populate_hour(entry, hour_widgets)
        return day_count

    def render_text(
        self,
        weather: WeatherSnapshot,
        location: str,
        now: datetime,
        forecast_days: int = 0,
        forecast_disabled: bool = False,
    ) -> str:
        """Plain-text report of the same data the widgets show.

        With ``forecast_disabled`` only the current conditions are rendered.
        """

        _ = self._
        headline = weather.condition or location
        lines = [
            truncate_location(location, self.options.location_length),
            f"{headline}, {self._display(weather.display_temperature)}",
            f"{_('Feels Like')}: {self._display(weather.display_feels_like)}",
            f"{_('Humidity')}: {self._display(weather.display_humidity)}",
            f"{_('Pressure')}: {self._display(weather.display_pressure)}",
            f"{_('Wind')}: {self._display(weather.display_wind)}",
        ]
        if weather.gusts_available():
            lines.append(f"{_('Gusts')}: {self._display(weather.display_gusts)}")
        lines.append(
            f"{_('Sunrise')}: {weather.display_sunrise(self.formatter)}   "
            f"{_('Sunset')}: {weather.display_sunset(self.formatter)}"
        )

        if weather.has_forecast and not forecast_disabled:
            lines.extend(["", f"{_('Next hours')}:"])
            for entry in select_window(weather.forecast, now):
                lines.append(self._hour_line(entry))

            grid = weather.forecast
            for index in range(min(forecast_days, len(grid))):
                entries = grid.day(index)
                if not entries:
                    continue
                lines.extend(["", f"{self.day_title(index, entries[0])}:"])
                lines.extend(self._hour_line(entry) for entry in entries)

        lines.extend(["", f"{_('Last update')}: {self.formatter.format_time(now)}"])
        return "\n".join(lines)

    def _hour_line(self, entry: ForecastEntry) -> str:
        weather = entry.weather
        parts = [
            entry.display_time(self.formatter),
            self._display(weather.display_temperature),
        ]
        if weather.condition:
            parts.append(weather.condition)
        precip = precipitation_text(weather)
        if precip:
            parts.append(precip)
        return "  ".join(parts)
