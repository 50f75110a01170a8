"""Celery tasks for the analytics app."""
from celery import shared_task

from analytics import services


@shared_task(name="analytics.tasks.capture_daily_snapshot")
def capture_daily_snapshot():
    snapshot = services.capture_snapshot()
    return f"snapshot={snapshot.pk}"
