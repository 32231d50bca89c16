# app/services/order_service.py
from typing import List

from sqlalchemy.orm import Session

from app.data.models.order import OrderModel, OrderStatus
from app.domain.errors import NotFound, ValidationError
from app.repos.order_repo import OrderRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Odczyt zamowien i zmiana statusu przez admina.
    Zamowienia tworzy wylacznie CheckoutService.
    """

    def __init__(self, db: Session):
        self.repo = OrderRepo(db)

    def list_orders(
        self,
        email: str | None = None,
        status: str | None = None,
        is_admin: bool = False,
    ) -> List[OrderModel]:
        # klient widzi tylko swoje zamowienia, admin wszystkie
        if not is_admin and not email:
            raise ValidationError("Email parameter required")
        if status:
            status = self._parse_status(status).value
        return self.repo.list_orders(email=email, status=status)

    def get_order(self, order_id: str) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFound("Order not found")
        return order

    def update_status(self, order_id: str, status: str) -> OrderModel:
        new_status = self._parse_status(status)
        order = self.repo.update_order_status(order_id, new_status.value)
        if not order:
            raise NotFound("Order not found")
        logger.info(f"Zamowienie {order_id} -> {new_status.value}")
        return order

    @staticmethod
    def _parse_status(status: str) -> OrderStatus:
        try:
            return OrderStatus(status)
        except ValueError:
            raise ValidationError(f"Invalid order status: {status}")
