"""Static default translations and the ambient request locale.

Bundles are nested dictionaries keyed by locale code, loaded from YAML or
JSON files in ``settings.LOCALES_DIR``::

    en:
      greeting: "Hello, %{name}"
      inbox:
        one: "1 message"
        other: "%{count} messages"

They are consulted only as the last tier, after the cache and the database.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from contextvars import ContextVar, Token
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from i18n_backend.app.core.config import settings

logger = logging.getLogger(__name__)

_BUNDLE_SUFFIXES = (".yml", ".yaml", ".json")

_current_locale: ContextVar[str | None] = ContextVar("current_locale", default=None)


def current_locale() -> str:
    """Return the locale bound to the running context, else the default."""
    return _current_locale.get() or settings.DEFAULT_LOCALE


def set_current_locale(code: str) -> Token[str | None]:
    return _current_locale.set(code)


def reset_current_locale(token: Token[str | None]) -> None:
    _current_locale.reset(token)


def split_key(key: str | Sequence[str] | None) -> list[str]:
    """Split a dotted key (or a list of dotted segments) into path parts."""
    if key is None:
        return []
    if isinstance(key, str):
        return [part for part in key.split(".") if part]
    parts: list[str] = []
    for segment in key:
        parts.extend(split_key(str(segment)))
    return parts


def _present(value: Any) -> bool:
    if value is None or value is False:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, dict)):
        return bool(value)
    return True


def flatten_keys(tree: Mapping[str, Any], parent: Sequence[str] = ()) -> list[str]:
    """Return the dotted path of every non-blank leaf in *tree*."""
    keys: list[str] = []
    for name, value in tree.items():
        full_key = [*parent, str(name)]
        if isinstance(value, Mapping):
            keys.extend(flatten_keys(value, full_key))
        elif _present(value):
            keys.append(".".join(full_key))
    return keys


def _deep_merge(target: dict[str, Any], source: Mapping[str, Any]) -> None:
    for name, value in source.items():
        name = str(name)
        if isinstance(value, Mapping):
            node = target.get(name)
            if not isinstance(node, dict):
                node = target[name] = {}
            _deep_merge(node, value)
        else:
            target[name] = value


def load_bundle_file(path: Path) -> dict[str, Any]:
    """Read one bundle file. Top-level keys are locale codes."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f) if path.suffix == ".json" else yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Bundle {path} must map locale codes to translations")
    return data


class StaticFallback:
    """Read-only lookup over preloaded default translation bundles."""

    def __init__(self, bundles: Mapping[str, Mapping[str, Any]] | None = None) -> None:
        self._translations: dict[str, dict[str, Any]] = {}
        for code, data in (bundles or {}).items():
            self.store_translations(code, data)

    @classmethod
    def from_directory(cls, directory: str | Path) -> StaticFallback:
        fallback = cls()
        for path in sorted(Path(directory).iterdir()):
            if path.suffix not in _BUNDLE_SUFFIXES:
                continue
            logger.debug("Loading translation bundle %s", path)
            for code, data in load_bundle_file(path).items():
                fallback.store_translations(code, data)
        return fallback

    def store_translations(self, locale: str, data: Mapping[str, Any]) -> None:
        _deep_merge(self._translations.setdefault(str(locale), {}), data)

    def available_locales(self) -> list[str]:
        return sorted(self._translations)

    def translations(self, locale: str) -> dict[str, Any]:
        return self._translations.get(str(locale), {})

    def lookup(
        self,
        locale: str,
        key: str,
        scope: str | Sequence[str] | None = None,
    ) -> Any:
        """Walk ``locale.scope.key`` through the bundles.

        Returns a string, a nested mapping (e.g. plural branches), or None.
        """
        result: Any = self._translations
        for part in [str(locale), *split_key(scope), *split_key(key)]:
            if isinstance(result, list) and part.isdigit():
                index = int(part)
                result = result[index] if index < len(result) else None
            elif isinstance(result, Mapping):
                result = result.get(part)
            else:
                return None
            if result is None:
                return None
        return result


@lru_cache(maxsize=1)
def default_fallback() -> StaticFallback:
    """Bundles from ``settings.LOCALES_DIR``, loaded once per process."""
    path = Path(settings.LOCALES_DIR)
    if not path.is_dir():
        logger.warning("Locales directory not found: %s", path)
        return StaticFallback()
    return StaticFallback.from_directory(path)
