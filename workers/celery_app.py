# =============================================================================
# workers/celery_app.py - Celery Application for Push Delivery
# =============================================================================
# Creates the Celery app that runs send_push_notification. Broker and
# queues come from workers/config.py, which reads app.config.settings.
#
# Usage:
#   # Start a push worker
#   celery -A workers.celery_app worker -Q push,default --loglevel=info
# =============================================================================

import logging

from celery import Celery
from celery.signals import task_failure, task_postrun, task_prerun, worker_ready

from app.config import settings

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def _broker_host(url: str) -> str:
    # Strip credentials before logging
    return url.split("@")[-1]


def create_celery_app() -> Celery:
    """
    Create the push worker's Celery app.

    Returns:
        Celery app configured from CeleryConfig
    """
    app = Celery("closeshop_worker", include=["workers.tasks"])
    app.config_from_object("workers.config:CeleryConfig")

    logger.info(f"Celery app created with broker: {_broker_host(settings.REDIS_URL)}")
    return app


celery_app = create_celery_app()


# =============================================================================
# Signal Handlers
# =============================================================================

def _message_id(args, kwargs):
    message = args[0] if args else (kwargs or {}).get("message")
    return message.get("id") if isinstance(message, dict) else None


@worker_ready.connect
def worker_ready_handler(sender=None, **extra):
    """Warn once at startup if pushes cannot be delivered."""
    if not settings.FCM_SERVER_KEY:
        logger.warning("FCM_SERVER_KEY is not set, every push will be dropped")
    logger.info("Push worker ready")


@task_prerun.connect
def task_prerun_handler(sender=None, task_id=None, task=None, args=None, kwargs=None, **extra):
    logger.info(f"Task started: {task.name} [{task_id}] message={_message_id(args, kwargs)}")


@task_postrun.connect
def task_postrun_handler(sender=None, task_id=None, task=None, retval=None, state=None, **extra):
    logger.info(f"Task completed: {task.name} [{task_id}] - State: {state}, delivered: {retval}")


@task_failure.connect
def task_failure_handler(sender=None, task_id=None, exception=None, **extra):
    # Not retried; the message is dropped
    logger.error(f"Task failed: {sender.name} [{task_id}] - Error: {exception}")
