"""Persistent tier: locales and translation rows.

``create_translation`` commits, so a value written through by the resolver
survives even when the cache write that follows it fails.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from i18n_backend.app.core.exceptions import LocaleNotFound
from i18n_backend.app.models.locale import Locale, Translation

logger = logging.getLogger(__name__)


def get_locale_by_code(db: Session, code: str) -> Locale:
    """Return the locale for *code*. Raises LocaleNotFound."""
    locale = db.query(Locale).filter(Locale.code == str(code)).first()
    if locale is None:
        raise LocaleNotFound(str(code))
    return locale


def find_or_create_locale(db: Session, code: str, name: str | None = None) -> Locale:
    locale = db.query(Locale).filter(Locale.code == str(code)).first()
    if locale is None:
        locale = Locale(code=str(code), name=name)
        db.add(locale)
        db.flush()
    return locale


def available_locales(db: Session) -> list[str]:
    return [code for (code,) in db.query(Locale.code).order_by(Locale.code).all()]


def find_translation(db: Session, locale: Locale, key: str) -> Translation | None:
    """Return the row stored under derived *key* for *locale*, or None."""
    return (
        db.query(Translation)
        .filter(Translation.locale_id == locale.id, Translation.key == key)
        .first()
    )


def create_translation(
    db: Session,
    locale: Locale,
    key: str,
    value: str | None,
    raw_key: str | None = None,
) -> Translation:
    """Insert a row for derived *key* unless one exists, then commit.

    A duplicate insert from a concurrent writer is rolled back to a
    savepoint and the winning row is returned instead.
    """
    existing = find_translation(db, locale, key)
    if existing is not None:
        return existing

    translation = Translation(locale_id=locale.id, key=key, raw_key=raw_key, value=value)
    try:
        with db.begin_nested():
            db.add(translation)
    except IntegrityError:
        logger.info("Translation %s already created concurrently; reading it", key)
        winner = find_translation(db, locale, key)
        if winner is None:
            raise
        translation = winner
    db.commit()
    return translation


def upsert_translation(
    db: Session,
    locale: Locale,
    key: str,
    value: str | None,
    raw_key: str | None = None,
) -> Translation:
    """Create or overwrite the row for derived *key*. Does NOT commit."""
    translation = find_translation(db, locale, key)
    if translation is None:
        translation = Translation(locale_id=locale.id, key=key)
        db.add(translation)
    translation.raw_key = raw_key
    translation.value = value
    db.flush()
    return translation


def list_untranslated(db: Session, locale: Locale) -> list[Translation]:
    """Rows marked as known-untranslated for *locale*."""
    return (
        db.query(Translation)
        .filter(Translation.locale_id == locale.id, Translation.value.is_(None))
        .order_by(Translation.raw_key)
        .all()
    )
