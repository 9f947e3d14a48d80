from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from i18n_backend.app.api.deps import get_backend
from i18n_backend.app.core.exceptions import LocaleNotFound, MissingTranslation
from i18n_backend.app.schemas.translation import (
    BulkTranslateRequest,
    BulkTranslationOut,
    TranslationOut,
)
from i18n_backend.app.services.key_codec import derive_cache_key, qualify
from i18n_backend.app.services.resolver import DatabaseBackend, Key

router = APIRouter()

# Query parameters that are not interpolation values
_RESERVED_PARAMS = {"locale", "count", "scope", "default", "default_key"}


def _build_options(
    *,
    count: int | None,
    scope: list[str] | None,
    default: str | None,
    default_keys: list[str],
    values: dict[str, Any],
) -> dict[str, Any]:
    options: dict[str, Any] = dict(values)
    if count is not None:
        options["count"] = count
    if scope:
        options["scope"] = scope
    defaults: list[Any] = [Key(k) for k in default_keys]
    if default is not None:
        defaults.append(default)
    if defaults:
        options["default"] = defaults
    return options


def _split_scope(scope: str | None) -> list[str] | None:
    if not scope:
        return None
    return [part for part in scope.split(".") if part]


def _resolve_locale(backend: DatabaseBackend, locale: str | None) -> None:
    # an explicit locale must win over the Accept-Language one on the first call
    if locale:
        backend.set_locale(locale)


@router.post("/bulk", response_model=BulkTranslationOut)
def translate_bulk(
    payload: BulkTranslateRequest,
    backend: DatabaseBackend = Depends(get_backend),
) -> BulkTranslationOut:
    options = _build_options(
        count=payload.count,
        scope=payload.scope,
        default=payload.default,
        default_keys=payload.default_keys,
        values=payload.values,
    )
    try:
        _resolve_locale(backend, payload.locale)
        values = backend.translate(payload.locale, payload.keys, **options)
    except LocaleNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except MissingTranslation as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return BulkTranslationOut(locale=backend.locale.code, values=values)


@router.delete("/cache/{key:path}", status_code=status.HTTP_204_NO_CONTENT)
def purge_cached_translation(
    key: str,
    locale: str | None = Query(None),
    scope: str | None = Query(None, description="Dotted scope, e.g. activerecord.errors"),
    backend: DatabaseBackend = Depends(get_backend),
) -> None:
    try:
        target = backend.set_locale(locale) if locale else backend.locale_in_context()
    except LocaleNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    backend.cache_store.delete(derive_cache_key(target.code, qualify(key, _split_scope(scope))))


@router.get("/{key:path}", response_model=TranslationOut)
def get_translation(
    key: str,
    request: Request,
    locale: str | None = Query(None),
    count: int | None = Query(None),
    scope: str | None = Query(None, description="Dotted scope, e.g. activerecord.errors"),
    default: str | None = Query(None),
    default_key: list[str] = Query([]),
    backend: DatabaseBackend = Depends(get_backend),
) -> TranslationOut:
    values = {
        name: value
        for name, value in request.query_params.items()
        if name not in _RESERVED_PARAMS
    }
    options = _build_options(
        count=count,
        scope=_split_scope(scope),
        default=default,
        default_keys=default_key,
        values=values,
    )
    try:
        _resolve_locale(backend, locale)
        value = backend.translate(locale, key, **options)
    except LocaleNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except MissingTranslation as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return TranslationOut(locale=backend.locale.code, key=key, value=value)
