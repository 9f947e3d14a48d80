"""Tests for pluralization rules and interpolation."""

from __future__ import annotations

import pytest

from i18n_backend.app.services.post_processing import (
    interpolate,
    is_plural_mapping,
    plural_category,
    plural_keys,
    pluralize,
)


class TestPluralRules:
    @pytest.mark.parametrize(
        ("locale", "count", "expected"),
        [
            ("en", 1, "one"),
            ("en", 0, "other"),
            ("en", 2, "other"),
            ("en-GB", 1, "one"),
            ("fr", 0, "one"),
            ("fr", 1, "one"),
            ("fr-CA", 2, "other"),
            ("ru", 1, "one"),
            ("ru", 3, "few"),
            ("ru", 5, "many"),
            ("ru", 11, "many"),
            ("ru", 21, "one"),
            ("pl", 22, "few"),
            ("pl", 12, "many"),
            ("ar", 0, "zero"),
            ("ar", 2, "two"),
            ("ar", 105, "few"),
            ("ja", 1, "other"),
            ("xx", 1, "one"),
        ],
    )
    def test_category(self, locale: str, count: int, expected: str) -> None:
        assert plural_category(locale, count) == expected

    def test_fractions_are_other(self) -> None:
        assert plural_category("en", 1.5) == "other"
        assert plural_category("en", 1.0) == "one"

    def test_zero_tried_first(self) -> None:
        assert plural_keys("en", 0) == ["zero", "other"]
        assert plural_keys("ar", 0) == ["zero"]
        assert plural_keys("en", 3) == ["other"]


class TestPluralize:
    entry = {"one": "1 item", "other": "%{count} items"}

    def test_selects_branch(self) -> None:
        assert pluralize("en", self.entry, 1) == "1 item"
        assert pluralize("en", self.entry, 5) == "%{count} items"

    def test_without_count_returns_entry(self) -> None:
        assert pluralize("en", self.entry, None) is self.entry

    def test_strings_pass_through(self) -> None:
        assert pluralize("en", "plain", 3) == "plain"

    def test_zero_branch_preferred(self) -> None:
        entry = {"zero": "none", "one": "one", "other": "many"}
        assert pluralize("en", entry, 0) == "none"

    def test_missing_branch_falls_back_to_other(self) -> None:
        assert pluralize("ru", self.entry, 3) == "%{count} items"

    def test_is_plural_mapping(self) -> None:
        assert is_plural_mapping(self.entry)
        assert not is_plural_mapping({"blank": "can't be blank"})
        assert not is_plural_mapping({})
        assert not is_plural_mapping("one")


class TestInterpolate:
    def test_named(self) -> None:
        assert interpolate("Hello, %{name}", {"name": "Ada"}) == "Hello, Ada"

    def test_repeated_and_multiple(self) -> None:
        result = interpolate("%{a}-%{b}-%{a}", {"a": 1, "b": "x"})
        assert result == "1-x-1"

    def test_unknown_placeholder_untouched(self) -> None:
        assert interpolate("Hi %{name}", {"other": 1}) == "Hi %{name}"

    def test_no_values_returns_value_unchanged(self) -> None:
        assert interpolate("100%% %{x}", {}) == "100%% %{x}"
        assert interpolate("100%% %{x}", None) == "100%% %{x}"

    def test_escaped_percent(self) -> None:
        assert interpolate("%%{name} is %{name}", {"name": "Ada"}) == "%{name} is Ada"

    def test_formatted(self) -> None:
        assert interpolate("%<n>05d", {"n": 42}) == "00042"
        assert interpolate("%<price>.2f SAR", {"price": 9.5}) == "9.50 SAR"

    def test_non_strings_pass_through(self) -> None:
        assert interpolate(None, {"a": 1}) is None
        mapping = {"one": "x"}
        assert interpolate(mapping, {"a": 1}) is mapping
