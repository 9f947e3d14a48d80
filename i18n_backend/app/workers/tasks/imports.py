"""Bundle import tasks."""

from __future__ import annotations

from i18n_backend.app.workers.celery_app import celery


@celery.task(name="i18n_backend.app.workers.tasks.imports.import_bundle_file")
def import_bundle_file(path: str, mark_untranslated: bool = True) -> dict:
    """Import a YAML/JSON bundle into the translations table.

    Cache entries of the imported keys are dropped from the default cache
    store so workers and web processes serve the new values.
    """
    from i18n_backend.app.core.database import SessionLocal
    from i18n_backend.app.services.cache_store import lookup_store
    from i18n_backend.app.services.importer import load_from_yml

    db = SessionLocal()
    try:
        summary = load_from_yml(
            db, path, cache_store=lookup_store(), mark_untranslated=mark_untranslated
        )
    finally:
        db.close()
    return {"imported": summary}


@celery.task(name="i18n_backend.app.workers.tasks.imports.clear_cache")
def clear_cache() -> dict:
    """Drop every cached translation from the default cache store."""
    from i18n_backend.app.services.cache_store import lookup_store

    lookup_store().clear()
    return {"cleared": True}
