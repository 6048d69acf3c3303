"""
Celery application for the therapy chat pipeline.

One queue-facing task, therapy/session.message, processes an assistant
placeholder. Acks are late and prefetch is one so a worker that dies
mid-run leaves the message for redelivery instead of losing it.

Dependencies: celery, backend.configs, backend.observability
System role: Background task processing
"""

from celery import Celery
from celery.signals import setup_logging

from backend.configs import get_settings
from backend.observability.logger import configure_logging

settings = get_settings()
celery_config = settings.celery

celery_app = Celery(
    "mindwell",
    broker=celery_config.broker_url,
    backend=celery_config.result_backend_url,
    include=["backend.workers.tasks.chat_message"],
)

celery_app.conf.update(
    task_serializer=celery_config.task_serializer,
    result_serializer=celery_config.result_serializer,
    accept_content=celery_config.accept_content,
    timezone=celery_config.timezone,
    task_max_retries=celery_config.task_max_retries,
    task_always_eager=celery_config.task_always_eager,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,
)


@setup_logging.connect
def configure_worker_logging(**kwargs) -> None:
    """Use the API's log format so worker lines carry correlation IDs too."""
    configure_logging(settings.log_level)
