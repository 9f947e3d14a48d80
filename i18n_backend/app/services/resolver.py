"""Database-backed translation lookup.

Each key is looked up in three tiers, fastest first::

    cache -> database -> static bundles

A value found in the bundles (or through ``default``) is written back to
the database and the cache, so later lookups of the same key stop at the
cache::

    cache -> database -> bundles -> database -> cache

Unscoped keys that cannot be found anywhere are echoed back (and stored,
so the miss is remembered). Scoped keys that cannot be found raise
``MissingTranslation``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from sqlalchemy.orm import Session

from i18n_backend.app.core.exceptions import MissingTranslation
from i18n_backend.app.core.i18n import StaticFallback, current_locale, default_fallback
from i18n_backend.app.models.locale import Locale
from i18n_backend.app.services.cache_store import CacheStore, lookup_store
from i18n_backend.app.services.key_codec import derive_cache_key, qualify
from i18n_backend.app.services.post_processing import (
    interpolate,
    is_plural_mapping,
    plural_keys,
    pluralize,
)
from i18n_backend.app.services.translations import (
    available_locales,
    create_translation,
    find_translation,
    get_locale_by_code,
)

logger = logging.getLogger(__name__)

# Options that never reach interpolation. ``count`` does, as %{count}.
RESERVED_OPTIONS = frozenset({"scope", "default"})


class Key(str):
    """Marks a ``default`` entry as a key to look up rather than literal text.

    ``default="Hello"`` renders "Hello"; ``default=Key("greeting")``
    resolves the ``greeting`` key with the same options.
    """


def _locale_code(locale: str | Locale | None) -> str | None:
    if locale is None:
        return None
    if isinstance(locale, Locale):
        return locale.code
    return str(locale)


class DatabaseBackend:
    """Translation resolver for one resolution context (e.g. one request).

    Keeps the last resolved ``Locale`` so repeated calls do not query it
    again. Instances must not be shared between concurrent contexts.
    """

    def __init__(
        self,
        db: Session,
        *,
        cache_store: Any = None,
        fallback: StaticFallback | None = None,
        current_locale: Callable[[], str] = current_locale,
    ) -> None:
        self.db = db
        self._cache_store = lookup_store(cache_store)
        self.fallback = fallback if fallback is not None else default_fallback()
        self._current_locale = current_locale
        self.locale: Locale | None = None

    @property
    def cache_store(self) -> CacheStore:
        return self._cache_store

    @cache_store.setter
    def cache_store(self, store: Any) -> None:
        self._cache_store = lookup_store(store)

    def set_locale(self, code: str) -> Locale:
        self.locale = get_locale_by_code(self.db, code)
        return self.locale

    def available_locales(self) -> list[str]:
        return available_locales(self.db)

    def reload(self) -> None:
        # Rows and bundles are read on demand; there is nothing to reload.
        return None

    def locale_in_context(self, locale: str | Locale | None = None) -> Locale:
        """Resolve and remember the locale the next lookup would use."""
        self.locale = self._locale_in_context(locale)
        return self.locale

    # ─── Public lookup ───────────────────────────────────────────────────────

    def translate(
        self,
        locale: str | Locale | None,
        key: str | Sequence[str],
        **options: Any,
    ) -> str | list[str]:
        """Resolve *key* (or each key of a list) in *locale*.

        Options: ``count`` selects a plural branch, ``scope`` prefixes the
        key, ``default`` is a literal, a ``Key`` or a list of them; any
        other option is an interpolation value.
        """
        self.locale = self._locale_in_context(locale)

        if isinstance(key, (list, tuple)):
            return [self.translate(locale, k, **options) for k in key]

        values = {name: v for name, v in options.items() if name not in RESERVED_OPTIONS}
        entry = self._lookup(self.locale, key, options)
        value = interpolate(pluralize(self.locale.code, entry, options.get("count")), values)
        return key if value is None else value

    # ─── Tiers ───────────────────────────────────────────────────────────────

    def _locale_in_context(self, locale: str | Locale | None) -> Locale:
        code = _locale_code(locale)
        if self.locale is not None and code is not None:
            # explicit locale for this call
            if self.locale.code == code:
                return self.locale
            return get_locale_by_code(self.db, code)
        if self.locale is not None:
            # follow the ambient locale if it changed since the last call
            current = str(self._current_locale())
            if self.locale.code == current:
                return self.locale
            return get_locale_by_code(self.db, current)
        return get_locale_by_code(self.db, str(self._current_locale()))

    def _lookup(self, locale: Locale, key: str, options: Mapping[str, Any]) -> Any:
        """Return the unprocessed value for *key*, populating faster tiers.

        The result is a string, or the plural branches found in the bundles
        when a ``count`` was given.
        """
        count = options.get("count")
        scope = options.get("scope")
        lookup_options = {name: v for name, v in options.items() if name != "default"}

        qualified_key = qualify(key, scope)
        cache_key = derive_cache_key(locale.code, qualified_key)

        candidates: list[str] = []
        if count is not None:
            candidates = [
                derive_cache_key(locale.code, f"{qualified_key}.{category}")
                for category in plural_keys(locale.code, count)
            ]
        candidates.append(cache_key)

        value = self._read_cache(candidates)
        if value is not None:
            return value
        value = self._read_database(locale, candidates)
        if value is not None:
            return value

        entry = self.fallback.lookup(locale.code, key, scope)
        branches: Mapping[str, Any] | None = None
        if is_plural_mapping(entry):
            branches = entry
            value = entry.get("other")
        elif entry is not None and not isinstance(entry, (Mapping, list)):
            value = str(entry)
        if value is None:
            value = self._default(locale, options.get("default"), lookup_options)
            if is_plural_mapping(value):
                branches = value
                value = value.get("other")
            elif value is not None and count is not None:
                # already the branch for this count; keep it off the base key
                branch_key = f"{qualified_key}.{plural_keys(locale.code, count)[0]}"
                return self._populate(
                    locale, derive_cache_key(locale.code, branch_key), branch_key, value
                )

        if scope and value is None:
            # strict for scoped keys, also ends recursive default lookups
            raise MissingTranslation(locale.code, qualified_key, lookup_options)

        stored = self._populate(
            locale, cache_key, qualified_key, value if value is not None else qualified_key
        )
        if branches is not None:
            self._populate_branches(locale, qualified_key, branches)
            if count is not None:
                return branches
        return stored

    def _read_cache(self, keys: Sequence[str]) -> str | None:
        for cache_key in keys:
            value = self.cache_store.read(cache_key, raw=True)
            if value is not None:
                logger.debug("Cache hit for %s", cache_key)
                return value
        return None

    def _read_database(self, locale: Locale, keys: Sequence[str]) -> str | None:
        for cache_key in keys:
            translation = find_translation(self.db, locale, cache_key)
            if translation is not None and translation.value is not None:
                logger.debug("Database hit for %s", cache_key)
                self.cache_store.write(cache_key, translation.value, raw=True)
                return translation.value
        return None

    def _default(self, locale: Locale, default: Any, options: Mapping[str, Any]) -> Any:
        if default is None:
            return None
        if isinstance(default, Key):
            # with a count this may be the branch mapping, picked by the caller
            try:
                return self._lookup(locale, str(default), options)
            except MissingTranslation:
                return None
        if isinstance(default, str):
            return default
        if isinstance(default, (list, tuple)):
            for candidate in default:
                result = self._default(locale, candidate, options)
                if result is not None:
                    return result
            return None
        return str(default)

    def _populate(self, locale: Locale, cache_key: str, qualified_key: str, value: str) -> str:
        translation = create_translation(self.db, locale, cache_key, value, raw_key=qualified_key)
        stored = translation.value if translation.value is not None else value
        self.cache_store.write(cache_key, stored, raw=True)
        logger.info("Stored translation %s as %s", qualified_key, cache_key)
        return stored

    def _populate_branches(
        self, locale: Locale, qualified_key: str, branches: Mapping[str, Any]
    ) -> None:
        for category, text in branches.items():
            if category == "other" or text is None:
                continue
            branch_key = f"{qualified_key}.{category}"
            self._populate(locale, derive_cache_key(locale.code, branch_key), branch_key, str(text))
