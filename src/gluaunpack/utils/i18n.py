from __future__ import annotations

"""
Internationalization (i18n) Utility.

Singleton manager for user-facing strings. Keys use dot-notation over nested
JSON locale files and support str.format interpolation.
"""

import json
import logging
import os
from typing import Any, Dict

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"
LOCALES_REL_PATH = os.path.join("..", "interface", "locales")


class I18n:
    """
    Locale-specific string lookup.

    Unknown keys resolve to the key itself so a missing translation never
    breaks output.
    """

    def __init__(self, locale: str = DEFAULT_LOCALE):
        self._translations: Dict[str, Any] = {}

        base_dir = os.path.dirname(os.path.abspath(__file__))
        self._locales_path = os.path.abspath(os.path.join(base_dir, LOCALES_REL_PATH))

        self.load_locale(locale)

    def load_locale(self, locale: str) -> None:
        """
        Load a translation dictionary from the locales directory.

        Args:
            locale: ISO identifier of the language (e.g. 'en').
        """
        file_path = os.path.join(self._locales_path, f"{locale}.json")

        if not os.path.exists(file_path):
            logger.warning(f"I18n: Locale resource missing at '{file_path}'. Fallback active.")
            self._translations = {}
            return

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                self._translations = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"I18n: Corruption in locale file {file_path}: {e}")
            self._translations = {}

    def t(self, key: str, **kwargs: Any) -> str:
        """
        Resolve and format a translation string.

        Args:
            key: Dot-separated identifier (e.g. 'cli.status.summary').
            **kwargs: Interpolation variables.

        Returns:
            str: Translated text, or key when it cannot be resolved.
        """
        current: Any = self._translations
        for k in key.split("."):
            if not isinstance(current, dict):
                return key
            current = current.get(k)

        if not isinstance(current, str):
            return key

        try:
            return current.format(**kwargs) if kwargs else current
        except (KeyError, IndexError, ValueError) as e:
            logger.debug(f"I18n: Formatting error for '{key}': {e}")
            return current


i18n = I18n(DEFAULT_LOCALE)
