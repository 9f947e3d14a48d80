"""Shared test fixtures.

Each test gets a fresh in-memory SQLite database, an empty in-memory cache
and a small set of static bundles, so tests never pollute each other.
"""

from __future__ import annotations

from typing import Any, Generator

import pytest
from fastapi import Depends, Request
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from i18n_backend.app.api.deps import get_backend
from i18n_backend.app.core.database import Base, get_db
from i18n_backend.app.core.i18n import StaticFallback
from i18n_backend.app.main import app
from i18n_backend.app.models.locale import Locale
from i18n_backend.app.services.cache_store import MemoryCacheStore
from i18n_backend.app.services.resolver import DatabaseBackend
from i18n_backend.app.services.translations import find_or_create_locale


# ─── Static bundles ──────────────────────────────────────────────────────────

BUNDLES: dict[str, dict[str, Any]] = {
    "en": {
        "title": "Welcome",
        "greeting": "Hello, %{name}",
        "inbox": {"one": "1 item", "other": "%{count} items"},
        "apples": {"zero": "no apples", "one": "one apple", "other": "%{count} apples"},
        "activerecord": {"errors": {"blank": "can't be blank"}},
        "date": {"day_names": ["Sunday", "Monday", "Tuesday"]},
        "price": "Total: %<amount>.2f",
    },
    "fr": {
        "title": "Bienvenue",
        "greeting": "Bonjour, %{name}",
        "inbox": {"one": "%{count} élément", "other": "%{count} éléments"},
    },
}


# ─── Database ────────────────────────────────────────────────────────────────


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db(engine: Engine) -> Generator[Session, None, None]:
    session = Session(bind=engine)
    yield session
    session.close()


@pytest.fixture()
def locale_en(db: Session) -> Locale:
    locale = find_or_create_locale(db, "en", name="English")
    db.commit()
    return locale


@pytest.fixture()
def locale_fr(db: Session) -> Locale:
    locale = find_or_create_locale(db, "fr", name="Français")
    db.commit()
    return locale


# ─── Tiers ───────────────────────────────────────────────────────────────────


@pytest.fixture()
def cache() -> MemoryCacheStore:
    return MemoryCacheStore()


@pytest.fixture()
def fallback() -> StaticFallback:
    return StaticFallback(BUNDLES)


@pytest.fixture()
def backend(
    db: Session,
    cache: MemoryCacheStore,
    fallback: StaticFallback,
    locale_en: Locale,
    locale_fr: Locale,
) -> DatabaseBackend:
    """Resolver whose ambient locale is English."""
    return DatabaseBackend(
        db, cache_store=cache, fallback=fallback, current_locale=lambda: "en"
    )


# ─── HTTP ────────────────────────────────────────────────────────────────────


@pytest.fixture()
def client(
    db: Session,
    cache: MemoryCacheStore,
    fallback: StaticFallback,
    locale_en: Locale,
    locale_fr: Locale,
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[TestClient, None, None]:
    """FastAPI TestClient wired to the test session, cache and bundles."""
    from i18n_backend.app.core.config import settings

    monkeypatch.setattr(settings, "SUPPORTED_LOCALES", ["en", "fr"])

    def _override_get_db() -> Generator[Session, None, None]:
        yield db

    def _override_get_backend(
        request: Request, session: Session = Depends(get_db)
    ) -> DatabaseBackend:
        return DatabaseBackend(
            session,
            cache_store=cache,
            fallback=fallback,
            current_locale=lambda: request.state.language,
        )

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_backend] = _override_get_backend
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
