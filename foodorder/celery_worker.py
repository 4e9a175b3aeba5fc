# foodorder/celery_worker.py
from celery import Celery

from foodorder.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "foodorder",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# tasks must be imported explicitly to be registered
celery_app.conf.imports = (
    "foodorder.tasks.sweep",
    "foodorder.services.notification_service",
)

celery_app.conf.beat_schedule = {
    "purge-abandoned-orders": {
        "task": "foodorder.tasks.sweep.purge_abandoned_orders_task",
        "schedule": 300.0,
    },
}

celery_app.conf.timezone = "UTC"
