"""Accept-Language detection middleware."""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from i18n_backend.app.core.config import settings
from i18n_backend.app.core.i18n import reset_current_locale, set_current_locale


class LanguageMiddleware(BaseHTTPMiddleware):
    """Parse ``Accept-Language`` and expose ``request.state.language``.

    The resolved language is also bound as the current locale for the
    duration of the request and echoed back via ``Content-Language``.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        accept = request.headers.get("Accept-Language", "")
        language = _parse_preferred(accept)
        request.state.language = language

        token = set_current_locale(language)
        try:
            response = await call_next(request)
        finally:
            reset_current_locale(token)
        response.headers["Content-Language"] = language
        return response


def _parse_preferred(header: str) -> str:
    """Return the best supported language from an Accept-Language header."""
    supported = {code.lower(): code for code in settings.SUPPORTED_LOCALES}
    for part in header.split(","):
        tag = part.split(";")[0].strip().lower()
        # Match full tag or primary subtag (e.g. "fr-CA" -> "fr")
        if tag in supported:
            return supported[tag]
        primary = tag.split("-")[0]
        if primary in supported:
            return supported[primary]
    return settings.DEFAULT_LOCALE
