from sqlalchemy import Column, Integer, Numeric, String

from app.data.database import Base
from app.data.models.ids import new_id


class ShippingOptionModel(Base):
    __tablename__ = "shipping_options"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(120), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    delivery_days = Column(Integer, nullable=True)
