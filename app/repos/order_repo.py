# app/repos/order_repo.py
from datetime import datetime
from typing import List

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from app.data.models.order import OrderModel, OrderStatus


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def _with_details(self):
        return select(OrderModel).options(
            selectinload(OrderModel.items),
            selectinload(OrderModel.shipping_option),
        )

    def add_order(self, order: OrderModel) -> OrderModel:
        """Dodaje zamowienie z pozycjami do biezacej transakcji (bez commit)."""
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: str) -> OrderModel | None:
        return self.db.execute(
            self._with_details().where(OrderModel.id == order_id)
        ).scalar_one_or_none()

    def list_orders(self, email: str | None = None, status: str | None = None) -> List[OrderModel]:
        stmt = self._with_details()
        if email:
            stmt = stmt.where(OrderModel.customer_email == email)
        if status:
            stmt = stmt.where(OrderModel.status == status)
        stmt = stmt.order_by(OrderModel.created_at.desc())
        return list(self.db.execute(stmt).scalars().all())

    def update_order_status(self, order_id: str, status: str) -> OrderModel | None:
        order = self.get_order(order_id)
        if order:
            order.status = status
            self.db.commit()
            self.db.refresh(order)
        return order

    def orders_since(self, since: datetime) -> List[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel).where(OrderModel.created_at >= since)
            ).scalars().all()
        )

    def count_by_status(self, status: OrderStatus) -> int:
        return self.db.execute(
            select(func.count(OrderModel.id)).where(OrderModel.status == status.value)
        ).scalar_one()
