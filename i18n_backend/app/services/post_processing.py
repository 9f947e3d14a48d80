"""Pluralization and interpolation applied to every resolved value."""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import Any

PLURAL_CATEGORIES = frozenset({"zero", "one", "two", "few", "many", "other"})


def _one_other(n: int) -> str:
    return "one" if n == 1 else "other"


def _east_slavic(n: int) -> str:
    if n % 10 == 1 and n % 100 != 11:
        return "one"
    if 2 <= n % 10 <= 4 and not 12 <= n % 100 <= 14:
        return "few"
    return "many"


def _polish(n: int) -> str:
    if n == 1:
        return "one"
    if 2 <= n % 10 <= 4 and not 12 <= n % 100 <= 14:
        return "few"
    return "many"


def _arabic(n: int) -> str:
    if n == 0:
        return "zero"
    if n == 1:
        return "one"
    if n == 2:
        return "two"
    if 3 <= n % 100 <= 10:
        return "few"
    if 11 <= n % 100 <= 99:
        return "many"
    return "other"


# CLDR cardinal rules for integer counts, keyed by primary language subtag
PLURAL_RULES: dict[str, Callable[[int], str]] = {
    "en": _one_other,
    "de": _one_other,
    "es": _one_other,
    "it": _one_other,
    "nl": _one_other,
    "pt": _one_other,
    "sv": _one_other,
    "fr": lambda n: "one" if n in (0, 1) else "other",
    "ru": _east_slavic,
    "uk": _east_slavic,
    "be": _east_slavic,
    "pl": _polish,
    "ar": _arabic,
    "ja": lambda n: "other",
    "ko": lambda n: "other",
    "zh": lambda n: "other",
}


def plural_rule(locale: str) -> Callable[[int], str]:
    code = str(locale).lower().replace("_", "-")
    return PLURAL_RULES.get(code) or PLURAL_RULES.get(code.split("-")[0], _one_other)


def plural_category(locale: str, count: float) -> str:
    if isinstance(count, float):
        if not count.is_integer():
            return "other"
        count = int(count)
    return plural_rule(locale)(abs(int(count)))


def plural_keys(locale: str, count: float) -> list[str]:
    """Branch names to try for *count*, most specific first.

    An explicit ``zero`` branch wins for a count of 0 even in locales whose
    rules have no zero category.
    """
    category = plural_category(locale, count)
    if count == 0 and category != "zero":
        return ["zero", category]
    return [category]


def is_plural_mapping(entry: Any) -> bool:
    return (
        isinstance(entry, Mapping)
        and bool(entry)
        and all(str(name) in PLURAL_CATEGORIES for name in entry)
    )


def pluralize(locale: str, entry: Any, count: float | None) -> Any:
    """Pick the branch of a plural mapping matching *count*.

    Anything that is not a mapping, or a call without a count, passes
    through unchanged. A missing branch falls back to ``other``.
    """
    if count is None or not isinstance(entry, Mapping):
        return entry
    for category in plural_keys(locale, count):
        if category in entry:
            return entry[category]
    return entry.get("other")


_INTERPOLATION_RE = re.compile(
    r"%%|%\{(\w+)\}|%<(\w+)>(.*?\d*\.?\d*[diouxXeEfFgGcs])"
)


def interpolate(value: Any, values: Mapping[str, Any] | None) -> Any:
    """Substitute ``%{name}`` and ``%<name>fmt`` placeholders.

    ``%%`` renders a literal percent sign. Placeholders without a matching
    value are left as they are.
    """
    if not isinstance(value, str) or not values:
        return value

    def _replace(match: re.Match[str]) -> str:
        if match.group(0) == "%%":
            return "%"
        name = match.group(1) or match.group(2)
        if name not in values:
            return match.group(0)
        if match.group(1):
            return str(values[name])
        return ("%" + match.group(3)) % values[name]

    return _INTERPOLATION_RE.sub(_replace, value)
