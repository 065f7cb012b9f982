# =============================================================================
# workers/ - Celery Background Task Workers
# =============================================================================
# This package contains the Celery configuration and task definitions for
# background push delivery.
#
# Components:
# - celery_app.py: Celery application configuration
# - tasks.py: Task definitions (push notifications)
# - config.py: Worker-specific settings
#
# Usage:
#   # Start worker
#   celery -A workers.celery_app worker -Q push,default --loglevel=info
#
#   # Submit task (from API)
#   from workers.tasks import send_push_notification
#   send_push_notification.delay(message_row)
# =============================================================================

from .celery_app import celery_app
from . import tasks

__all__ = [
    "celery_app",
    "tasks",
]
