# foodorder/services/notification_service.py
from foodorder.celery_worker import celery_app
from foodorder.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """Sends user notifications through Celery."""

    @staticmethod
    def send_payment_notification(user_id: str, order_id: str):
        send_payment_notification_task.delay(user_id, order_id)


@celery_app.task(name="foodorder.services.notification_service.send_payment_notification_task")
def send_payment_notification_task(user_id: str, order_id: str):
    """
    Celery task - a real deployment would send email/SMS/push here.
    For now it only logs.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: payment received for order {order_id}")
    return {"user_id": user_id, "order_id": order_id, "status": "sent"}
