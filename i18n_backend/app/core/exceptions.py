"""Errors raised by the translation backend."""

from __future__ import annotations

from typing import Any


class I18nError(Exception):
    """Base class for translation backend errors."""


class MissingTranslation(I18nError):
    """A scoped lookup found no value in any tier or default.

    Unscoped lookups never raise this; they echo the key instead.
    """

    def __init__(self, locale: str, key: str, options: dict[str, Any] | None = None) -> None:
        self.locale = locale
        self.key = key
        self.options = dict(options or {})
        super().__init__(f"translation missing: {locale}.{key}")


class LocaleNotFound(I18nError, LookupError):
    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"Locale '{code}' does not exist")


class UnknownCacheStore(I18nError, ValueError):
    def __init__(self, name: object) -> None:
        self.name = name
        super().__init__(f"Unknown cache store: {name!r}")
