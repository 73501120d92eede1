__version__ = "1.0.0"
__version_info__ = (1, 0, 0)
__release_date__ = "12.10.2026"
__supported_languages__ = "English, Deutsch, Русский"

RELEASE_NOTES = """
New in 1.0.0
------------
- Open-Meteo current, hourly and daily forecast with one request per refresh
- Immutable weather snapshots with a single-owner cache slot
- Compact four-hour strip aligned to the next whole hour
- JSON settings store with migration from pre-1.28 and pre-1.30 layouts
- Units: °C/°F/K, km/h/mph/m/s/kn/Beaufort, mbar/inHg/bar/Pa/kPa/atm/mmHg
- Localized conditions and labels in en/de/ru
"""
