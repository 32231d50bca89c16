from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import Column, ForeignKey, String, DateTime, Numeric
from sqlalchemy.orm import relationship

from app.data.database import Base
from app.data.models.ids import new_id


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    PREPARING = "PREPARING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=new_id)
    customer_name = Column(String(200), nullable=False)
    customer_email = Column(String(320), nullable=False, index=True)

    status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value)
    # total ustalany raz, przy tworzeniu zamowienia
    total = Column(Numeric(10, 2), nullable=False)
    shipping_option_id = Column(String(36), ForeignKey("shipping_options.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.position",
    )
    shipping_option = relationship("ShippingOptionModel")
