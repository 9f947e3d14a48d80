from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from i18n_backend.app.core.database import get_db
from i18n_backend.app.core.i18n import current_locale
from i18n_backend.app.services.resolver import DatabaseBackend


def get_backend(request: Request, db: Session = Depends(get_db)) -> DatabaseBackend:
    """One resolver per request, following the request's negotiated language."""

    def _request_locale() -> str:
        return getattr(request.state, "language", None) or current_locale()

    return DatabaseBackend(db, current_locale=_request_locale)
