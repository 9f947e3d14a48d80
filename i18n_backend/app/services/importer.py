"""Seed the translations table from static bundles.

Every non-blank leaf of a bundle becomes one row under its derived key:

* ``inbox.other`` is stored under ``inbox`` (the value the resolver returns
  when no count is given); ``inbox.one``, ``inbox.few``... keep their own
  keys, which is where the resolver looks for plural branches.
* a list leaf ``day_names: [Sun, Mon, ...]`` becomes ``day_names.0``,
  ``day_names.1``...
* keys present in the default locale but missing from another locale get a
  row with a NULL value, marking them as untranslated there.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from sqlalchemy.orm import Session

from i18n_backend.app.core.config import settings
from i18n_backend.app.core.i18n import StaticFallback, flatten_keys, load_bundle_file
from i18n_backend.app.models.locale import Locale
from i18n_backend.app.services.cache_store import CacheStore
from i18n_backend.app.services.key_codec import derive_cache_key
from i18n_backend.app.services.translations import (
    find_or_create_locale,
    find_translation,
    upsert_translation,
)

logger = logging.getLogger(__name__)

_PLURAL_OTHER_SUFFIX = ".other"


def storage_key(key: str) -> str:
    """Key a bundle leaf is stored under (``.other`` maps to the base key)."""
    if key.endswith(_PLURAL_OTHER_SUFFIX):
        return key[: -len(_PLURAL_OTHER_SUFFIX)]
    return key


def _write(
    db: Session,
    locale: Locale,
    key: str,
    value: str | None,
    cache_store: CacheStore | None,
) -> None:
    cache_key = derive_cache_key(locale.code, key)
    upsert_translation(db, locale, cache_key, value, raw_key=key)
    if cache_store is not None:
        cache_store.delete(cache_key)


def _import_locale(
    db: Session,
    code: str,
    tree: Mapping[str, Any],
    cache_store: CacheStore | None,
) -> tuple[Locale, set[str]]:
    locale = find_or_create_locale(db, code)
    bundle = StaticFallback({code: tree})
    written: set[str] = set()
    for key in flatten_keys(tree):
        value = bundle.lookup(code, key)
        key = storage_key(key)
        if isinstance(value, list):
            for index, item in enumerate(value):
                if item is not None:
                    _write(db, locale, f"{key}.{index}", str(item), cache_store)
                    written.add(f"{key}.{index}")
        else:
            _write(db, locale, key, str(value), cache_store)
            written.add(key)
    return locale, written


def load_bundle(
    db: Session,
    data: Mapping[str, Mapping[str, Any]],
    *,
    cache_store: CacheStore | None = None,
    mark_untranslated: bool = True,
) -> dict[str, int]:
    """Import ``{locale_code: nested translations}`` and commit.

    Existing rows are overwritten. When *cache_store* is given, the cache
    entries of every written key are dropped so the new values are served.
    Returns the number of rows written per locale.
    """
    imported: dict[str, tuple[Locale, set[str]]] = {}
    for code, tree in data.items():
        if not isinstance(tree, Mapping):
            raise ValueError(f"Translations for locale '{code}' must be a mapping")
        imported[str(code)] = _import_locale(db, str(code), tree, cache_store)

    summary = {code: len(keys) for code, (_, keys) in imported.items()}

    reference = imported.get(settings.DEFAULT_LOCALE)
    if mark_untranslated and reference is not None:
        _, reference_keys = reference
        for code, (locale, keys) in imported.items():
            if code == settings.DEFAULT_LOCALE:
                continue
            for key in sorted(reference_keys - keys):
                if find_translation(db, locale, derive_cache_key(code, key)) is None:
                    _write(db, locale, key, None, cache_store)
                    summary[code] += 1

    db.commit()
    for code, count in summary.items():
        logger.info("Imported %d translations for locale %s", count, code)
    return summary


def load_from_yml(
    db: Session,
    path: str | Path,
    *,
    cache_store: CacheStore | None = None,
    mark_untranslated: bool = True,
) -> dict[str, int]:
    """Import one YAML (or JSON) bundle file."""
    data = load_bundle_file(Path(path))
    return load_bundle(
        db, data, cache_store=cache_store, mark_untranslated=mark_untranslated
    )
