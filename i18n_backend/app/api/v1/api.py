from fastapi import APIRouter

from i18n_backend.app.api.v1.endpoints import locales, translations

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(locales.router, prefix="/locales", tags=["locales"])
api_router.include_router(translations.router, prefix="/translations", tags=["translations"])
