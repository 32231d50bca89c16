#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from app.data.models.category import CategoryModel
from app.data.models.product import ProductModel
from app.data.models.shipping_option import ShippingOptionModel
from app.data.models.order import OrderModel, OrderStatus
from app.data.models.order_item import OrderItemModel

__all__ = [
    "CategoryModel",
    "ProductModel",
    "ShippingOptionModel",
    "OrderModel",
    "OrderStatus",
    "OrderItemModel",
]
