import json
import logging
from pathlib import Path
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"
LOCALES_DIR = Path(__file__).resolve().parent.parent / "locales"


class Localization:
    """Message catalogs keyed by the English source text."""

    def __init__(self, locales_path: Optional[Path] = None):
        self.translations: Dict[str, Dict[str, str]] = {}
        self.default_language = DEFAULT_LANGUAGE
        self.load_translations(locales_path)

    def load_translations(self, locales_path: Optional[Path] = None):

        if locales_path is None:
            locales_path = LOCALES_DIR

        for locale_file in sorted(locales_path.glob("*.json")):
            lang_code = locale_file.stem
            try:
                with locale_file.open("r", encoding="utf-8") as f:
                    self.translations[lang_code] = json.load(f)
                logger.debug(
                    "Loaded translations for %s from %s", lang_code, locale_file
                )
            except (OSError, json.JSONDecodeError) as e:
                logger.error(
                    "Failed to load translations for %s at %s: %s",
                    lang_code,
                    locale_file,
                    e,
                )

    def gettext(self, text: str, lang: Optional[str] = None) -> str:

        if lang is None:
            lang = self.default_language
        catalog = self.translations.get(lang)
        if catalog is None:
            catalog = self.translations.get(self.default_language, {})
        translated = catalog.get(text)
        if not translated:
            return text
        return translated

    def translator(self, lang: Optional[str] = None) -> Callable[[str], str]:
        """One-argument translation function bound to ``lang``."""

        def translate(text: str) -> str:
            return self.gettext(text, lang)

        return translate

    def get_available_languages(self) -> list:

        return list(self.translations.keys())
