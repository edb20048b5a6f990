"""
Localization - Message catalogs and Accept-Language negotiation.

Catalogs are flat JSON objects (message key -> text) shipped in the
locales/ directory of this package, one file per language.
"""

import json
import logging
from importlib import resources

logger = logging.getLogger(__name__)

SUPPORTED_LOCALES = ("en", "id")


class Localizer:
    """Translate message keys for a negotiated locale."""

    def __init__(self, catalogs: dict[str, dict[str, str]], default_locale: str = "en") -> None:
        if default_locale not in catalogs:
            raise ValueError(f"No catalog for default locale: {default_locale}")
        self._catalogs = catalogs
        self.default_locale = default_locale

    @classmethod
    def from_package(cls, default_locale: str = "en") -> "Localizer":
        """Load every catalog in SUPPORTED_LOCALES from the locales/ directory."""
        locales_dir = resources.files("userauth.api") / "locales"
        catalogs = {
            locale: json.loads((locales_dir / f"{locale}.json").read_text(encoding="utf-8"))
            for locale in SUPPORTED_LOCALES
        }
        logger.debug("Loaded %d message catalog(s)", len(catalogs))
        return cls(catalogs, default_locale)

    def negotiate(self, accept_language: str | None) -> str:
        """
        Pick the locale for an Accept-Language header value.

        Entries are tried in descending q order and matched on the primary
        subtag ("id-ID" -> "id"). Anything unsupported falls back to the
        default locale.
        """
        if not accept_language:
            return self.default_locale

        candidates = []
        for position, entry in enumerate(accept_language.split(",")):
            tag, _, params = entry.strip().partition(";")
            quality = 1.0
            if params.strip().startswith("q="):
                try:
                    quality = float(params.strip()[2:])
                except ValueError:
                    quality = 0.0
            candidates.append((-quality, position, tag.strip().lower()))

        for _, _, tag in sorted(candidates):
            primary = tag.split("-")[0]
            if primary in self._catalogs:
                return primary
        return self.default_locale

    def translate(self, key: str, locale: str | None = None) -> str:
        """
        Look up a message key.

        Unknown locales use the default catalog; keys missing from the
        chosen catalog fall back to the default catalog, then to the key.
        """
        catalog = self._catalogs.get(locale or self.default_locale, {})
        if key in catalog:
            return catalog[key]
        return self._catalogs[self.default_locale].get(key, key)
