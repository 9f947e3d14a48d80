from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from i18n_backend.app.core.database import get_db
from i18n_backend.app.core.exceptions import LocaleNotFound
from i18n_backend.app.models.locale import Locale
from i18n_backend.app.schemas.translation import LocaleOut, UntranslatedOut
from i18n_backend.app.services.translations import get_locale_by_code, list_untranslated

router = APIRouter()


@router.get("", response_model=list[LocaleOut])
def list_locales(db: Session = Depends(get_db)) -> list[LocaleOut]:
    locales = db.query(Locale).order_by(Locale.code).all()
    return [LocaleOut(id=l.id, code=l.code, name=l.name) for l in locales]


@router.get("/{code}/untranslated", response_model=list[UntranslatedOut])
def list_untranslated_keys(code: str, db: Session = Depends(get_db)) -> list[UntranslatedOut]:
    try:
        locale = get_locale_by_code(db, code)
    except LocaleNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return [
        UntranslatedOut(key=t.key, raw_key=t.raw_key)
        for t in list_untranslated(db, locale)
    ]
