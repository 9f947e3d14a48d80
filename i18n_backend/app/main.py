import logging

from fastapi import FastAPI

from i18n_backend.app.api.v1.api import api_router
from i18n_backend.app.core.config import settings
from i18n_backend.app.middleware.language import LanguageMiddleware

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="i18n Database Backend")

# ─── Custom middleware (outermost executes first) ─────────────────────────────
app.add_middleware(LanguageMiddleware)

app.include_router(api_router)
