"""Celery application configuration."""

from celery import Celery

from app.core.config import settings

celery_app = Celery(
    "portfolio_tracker",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=[
        "app.tasks.price_updates",
    ],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=300,  # 5 minutes
    worker_prefetch_multiplier=1,
    task_acks_late=True,
)

# Scheduled tasks (Celery Beat)
celery_app.conf.beat_schedule = {
    "update-stock-prices": {
        "task": "app.tasks.price_updates.update_stock_prices",
        "schedule": settings.PRICE_REFRESH_INTERVAL,
    },
}
