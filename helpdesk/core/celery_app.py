import ssl
from typing import Any

from celery import Celery
from celery.signals import setup_logging as celery_setup_logging

import helpdesk.db.base  # noqa: F401 register models for relationship resolution
from helpdesk.core.config import settings
from helpdesk.core.log_config import setup_logging

NOTIFICATIONS_QUEUE = "notifications"

celery_app = Celery("helpdesk", broker=settings.REDIS_URL, backend=settings.REDIS_URL)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    result_expires=3600,
    # Notifications are queued after commit and must survive a worker crash
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,
    task_routes={"helpdesk.tickets.tasks.*": {"queue": NOTIFICATIONS_QUEUE}},
)

if settings.REDIS_URL.startswith("rediss://"):
    celery_app.conf.update(
        broker_use_ssl={"ssl_cert_reqs": ssl.CERT_NONE},
        redis_backend_use_ssl={"ssl_cert_reqs": ssl.CERT_NONE},
    )


@celery_setup_logging.connect
def _configure_worker_logging(**kwargs: Any) -> None:
    setup_logging()


celery_app.autodiscover_tasks(["helpdesk.tickets"])
