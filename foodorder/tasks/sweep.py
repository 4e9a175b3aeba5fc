# foodorder/tasks/sweep.py
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from foodorder.celery_worker import celery_app
from foodorder.data.database import SessionLocal
from foodorder.repos.order_repo import OrderRepo
from foodorder.utils.settings import ORDER_PAYMENT_TTL_SECONDS
from foodorder.utils.logging import get_logger

logger = get_logger(__name__)


def purge_abandoned_orders(db: Session, now: datetime | None = None, ttl_seconds: int = ORDER_PAYMENT_TTL_SECONDS) -> int:
    """Delete unpaid orders whose checkout was never completed within ``ttl_seconds``."""
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(seconds=ttl_seconds)

    deleted = OrderRepo(db).delete_unpaid_before(cutoff)
    logger.info(f"Purged {deleted} abandoned unpaid orders created before {cutoff.isoformat()}")
    return deleted


@celery_app.task(name="foodorder.tasks.sweep.purge_abandoned_orders_task")
def purge_abandoned_orders_task():
    logger.info("Abandoned order sweep started")

    db = SessionLocal()
    try:
        return purge_abandoned_orders(db)
    finally:
        db.close()
