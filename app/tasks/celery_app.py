"""
Celery application configuration.

Redis broker; background work is limited to email delivery, routed to the
``email`` queue:

    celery -A app.tasks.celery_app worker -Q email
"""

from celery import Celery

from app.config import settings

celery_app = Celery(
    "cryptoramp",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    task_routes={"app.tasks.email_tasks.*": {"queue": "email"}},
    # SendGrid calls time out after 30s
    task_time_limit=60,
    result_expires=3600,
)

celery_app.autodiscover_tasks(["app.tasks"], related_name="email_tasks")
