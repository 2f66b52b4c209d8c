"""
Celery application configuration for background task processing.
"""
import logging

from celery import Celery

from chatbot_studio.core.config import settings

logger = logging.getLogger(__name__)

# Create Celery application
celery_app = Celery(
    "chatbot_studio",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=[
        "chatbot_studio.workers.email_tasks",
    ],
)

# Configure Celery
celery_app.conf.update(
    # Serialization
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",

    # Timezone
    timezone="UTC",
    enable_utc=True,

    # Task execution
    task_track_started=True,
    task_time_limit=300,
    task_soft_time_limit=240,

    # Worker settings
    worker_prefetch_multiplier=1,

    # Result backend
    result_expires=86400,  # Results expire after 24 hours

    # Task acknowledgment
    task_acks_late=True,
    task_reject_on_worker_lost=True,

    # Task routing
    task_routes={
        "chatbot_studio.workers.email_tasks.*": {"queue": "email"},
    },

    # Run tasks in-process under test
    task_always_eager=settings.testing,
    task_eager_propagates=False,
)


__all__ = ["celery_app"]
