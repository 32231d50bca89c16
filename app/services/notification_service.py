# app/services/notification_service.py
from kombu.exceptions import OperationalError

from app.celery_worker import celery_app
from app.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysyłania powiadomień.
    Używa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_confirmation(order_id: str, customer_email: str, total: str) -> bool:
        """
        Potwierdzenie zamówienia. Zamówienie jest już zapisane,
        więc niedostępny broker nie może go wycofać.
        """
        try:
            send_order_confirmation_task.delay(order_id, customer_email, total)
            return True
        except OperationalError as e:
            logger.warning(f"Nie udało się zlecić powiadomienia dla zamówienia {order_id}: {e}")
            return False


@celery_app.task(name="app.services.notification_service.send_order_confirmation_task")
def send_order_confirmation_task(order_id: str, customer_email: str, total: str):
    """
    Celery task - w prawdziwym systemie wysłałby email.
    Teraz tylko loguje.
    """
    logger.info(f"[NOTIFICATION] {customer_email}: order {order_id} placed, total {total}")

    return {"order_id": order_id, "customer_email": customer_email, "status": "sent"}
