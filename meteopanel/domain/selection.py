from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Optional

from .weather import ForecastEntry, ForecastGrid

TODAY_STRIP_SIZE = 4


def aligned_hour(now: datetime) -> datetime:
    """Round ``now`` up to the next whole hour; exact hours are kept.

    Sub-second precision does not count towards rounding.
    """

    aligned = now.replace(minute=0, second=0, microsecond=0)
    if now.minute != 0 or now.second != 0:
        aligned += timedelta(hours=1)
    return aligned


def select_window(
    grid: Optional[ForecastGrid], now: datetime, size: int = TODAY_STRIP_SIZE
) -> List[ForecastEntry]:
    """Pick the entries for the compact "today" strip.

    Entries are scanned day-major. The first entry starting at or after the
    aligned hour opens the window; every following entry is taken as-is until
    ``size`` entries are collected. When nothing qualifies, the first ``size``
    entries of day 0 are used instead.
    """

    if grid is None or size <= 0:
        return []

    threshold = aligned_hour(now)
    items: List[ForecastEntry] = []
    for entry in grid.entries():
        if items or entry.start >= threshold:
            items.append(entry)
            if len(items) >= size:
                break

    if not items:
        items = list(grid.day(0)[:size])
    return items
