"""Tests for the persistent tier (locales and translation rows)."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from sqlalchemy.orm import Session

from i18n_backend.app.core.exceptions import LocaleNotFound
from i18n_backend.app.models.locale import Locale, Translation
from i18n_backend.app.services import translations as translations_module
from i18n_backend.app.services.translations import (
    available_locales,
    create_translation,
    find_or_create_locale,
    find_translation,
    get_locale_by_code,
    list_untranslated,
    upsert_translation,
)


class TestLocales:
    def test_get_unknown_locale(self, db: Session) -> None:
        with pytest.raises(LocaleNotFound) as exc_info:
            get_locale_by_code(db, "de")
        assert exc_info.value.code == "de"

    def test_find_or_create_is_idempotent(self, db: Session, locale_en: Locale) -> None:
        assert find_or_create_locale(db, "en") is locale_en
        assert db.query(Locale).count() == 1

    def test_available_locales_sorted(
        self, db: Session, locale_fr: Locale, locale_en: Locale
    ) -> None:
        assert available_locales(db) == ["en", "fr"]


class TestCreateTranslation:
    def test_first_writer_wins(self, db: Session, locale_en: Locale) -> None:
        first = create_translation(db, locale_en, "en:k", "first", raw_key="title")
        second = create_translation(db, locale_en, "en:k", "second", raw_key="title")

        assert second.id == first.id
        assert second.value == "first"
        assert db.query(Translation).count() == 1

    def test_same_key_in_other_locale_is_separate(
        self, db: Session, locale_en: Locale, locale_fr: Locale
    ) -> None:
        create_translation(db, locale_en, "shared", "en value")
        create_translation(db, locale_fr, "shared", "fr value")

        assert find_translation(db, locale_fr, "shared").value == "fr value"

    def test_concurrent_insert_reads_winning_row(
        self, db: Session, locale_en: Locale, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        upsert_translation(db, locale_en, "en:k", "winner", raw_key="title")
        db.commit()

        real_find = translations_module.find_translation
        # the existence check misses, as if the other writer committed just after it
        find_spy = MagicMock(side_effect=[None, real_find(db, locale_en, "en:k")])
        monkeypatch.setattr(translations_module, "find_translation", find_spy)

        row = create_translation(db, locale_en, "en:k", "loser", raw_key="title")

        assert row.value == "winner"
        assert find_spy.call_count == 2
        assert db.query(Translation).count() == 1


class TestUpsert:
    def test_overwrites_value(self, db: Session, locale_en: Locale) -> None:
        upsert_translation(db, locale_en, "en:k", None, raw_key="title")
        upsert_translation(db, locale_en, "en:k", "Welcome", raw_key="title")
        db.commit()

        assert find_translation(db, locale_en, "en:k").value == "Welcome"
        assert db.query(Translation).count() == 1


class TestUntranslated:
    def test_lists_only_null_rows(
        self, db: Session, locale_en: Locale, locale_fr: Locale
    ) -> None:
        create_translation(db, locale_fr, "fr:b", None, raw_key="b")
        create_translation(db, locale_fr, "fr:a", None, raw_key="a")
        create_translation(db, locale_fr, "fr:c", "C", raw_key="c")
        create_translation(db, locale_en, "en:d", None, raw_key="d")

        rows = list_untranslated(db, locale_fr)

        assert [r.raw_key for r in rows] == ["a", "b"]
