"""Locale selection and translation lookups."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from threading import Lock
from typing import Dict, Iterable, Optional, Union

from . import config, utils

logger = logging.getLogger(__name__)

TranslationTable = Dict[str, Dict[str, str]]


class Translations:
    """Read-only ``{locale: {key: value}}`` table with locale resolution.

    The table is loaded once and then only read; the lock guards the swap
    performed by ``load`` against concurrent lookups.
    """

    def __init__(
        self,
        table: Optional[TranslationTable] = None,
        *,
        default_locale: str = config.DEFAULT_LOCALE,
    ) -> None:
        self._lock = Lock()
        self._table: TranslationTable = _copy_table(table or {})
        self.default_locale = default_locale

    def load(self, path: Union[str, Path]) -> bool:
        """Replace the table with the contents of ``path``.

        On failure the current table is kept, the error is logged and False
        is returned.
        """

        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Could not load translations from %s: %s", path, exc)
            return False
        if not isinstance(data, dict) or not all(isinstance(v, dict) for v in data.values()):
            logger.warning("Translations file %s must map locales to objects", path)
            return False

        table = _copy_table(data)
        with self._lock:
            self._table = table
        logger.info("Loaded translations: %d locales available", len(table))
        return True

    @property
    def locales(self) -> Iterable[str]:
        with self._lock:
            return sorted(self._table)

    def has_locale(self, lang: str) -> bool:
        with self._lock:
            return lang in self._table

    def resolve(
        self,
        query_lang: Optional[str] = None,
        cookie_lang: Optional[str] = None,
        accept_language: Optional[str] = None,
    ) -> str:
        """Pick the first known locale among query, cookie and header."""

        candidates = [query_lang, cookie_lang]
        if accept_language:
            candidates.append(utils.first_language_tag(accept_language))
        for candidate in candidates:
            if candidate and self.has_locale(candidate):
                return candidate
        return self.default_locale

    def resolve_request(self, request) -> str:
        return self.resolve(
            request.args.get(config.LOCALE_PARAM),
            request.cookies.get(config.LOCALE_COOKIE),
            request.headers.get("Accept-Language"),
        )

    def get(self, lang: str, key: str) -> str:
        with self._lock:
            for locale in (lang, self.default_locale):
                entries = self._table.get(locale)
                if entries and key in entries:
                    return entries[key]
        return key

    def get_all(self, lang: str) -> Dict[str, str]:
        with self._lock:
            for locale in (lang, self.default_locale):
                if locale in self._table:
                    return dict(self._table[locale])
        return {}


def load_translations(
    path: Optional[Union[str, Path]],
    *,
    default_locale: str = config.DEFAULT_LOCALE,
) -> Translations:
    translations = Translations(default_locale=default_locale)
    if path:
        translations.load(path)
    return translations


def _copy_table(table: TranslationTable) -> TranslationTable:
    return {
        str(locale): {str(key): str(value) for key, value in entries.items()}
        for locale, entries in table.items()
    }
