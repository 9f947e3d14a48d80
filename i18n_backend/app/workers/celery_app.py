"""Celery application for translation imports.

Start a worker::

    celery -A i18n_backend.app.workers.celery_app worker -Q i18n --loglevel=info
"""

from __future__ import annotations

from celery import Celery

from i18n_backend.app.core.config import settings

celery = Celery(
    "i18n_backend",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
)

celery.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    # an import interrupted by a worker crash is run again
    task_acks_late=True,
    task_default_queue="i18n",
)

celery.autodiscover_tasks(["i18n_backend.app.workers.tasks"])
