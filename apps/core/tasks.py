from celery import Task
from django.conf import settings


class BaseTaskWithRetry(Task):
    """
    Base task for outbound delivery work: retries on any exception with an
    exponential backoff, up to NOTIFICATION_MAX_RETRIES attempts.
    """

    autoretry_for = (Exception,)
    retry_backoff = getattr(settings, "NEGOTIATION_SETTINGS", {}).get(
        "NOTIFICATION_RETRY_BACKOFF", 60
    )
    retry_backoff_max = 600
    retry_jitter = True
    max_retries = getattr(settings, "NEGOTIATION_SETTINGS", {}).get(
        "NOTIFICATION_MAX_RETRIES", 3
    )
