# app/domain/schemas.py
from datetime import datetime, date
from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from app.data.models.order import OrderStatus


class ApiModel(BaseModel):
    """Klucze JSON w camelCase, atrybuty w snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =====================================================
# CATALOG
# =====================================================
class CategoryIn(ApiModel):
    name: str = Field(..., min_length=1, max_length=120)
    slug: str | None = Field(None, max_length=160)


class CategoryOut(ApiModel):
    id: str
    name: str
    slug: str


class ProductCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    stock: int = Field(..., ge=0)
    images: List[str] = Field(default_factory=list)
    category_id: str | None = None
    seo_title: str | None = None
    seo_description: str | None = None
    slug: str | None = Field(None, max_length=160)
    featured: bool = False


class ProductUpdate(ApiModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    price: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    stock: int | None = Field(None, ge=0)
    images: List[str] | None = None
    category_id: str | None = None
    seo_title: str | None = None
    seo_description: str | None = None
    slug: str | None = Field(None, max_length=160)
    featured: bool | None = None


class ProductOut(ApiModel):
    id: str
    slug: str
    name: str
    description: str | None = None
    price: Decimal
    stock: int
    images: List[str] = []
    category_id: str | None = None
    category: CategoryOut | None = None
    featured: bool
    seo_title: str | None = None
    seo_description: str | None = None
    created_at: datetime


class ShippingOptionIn(ApiModel):
    name: str = Field(..., min_length=1, max_length=120)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    delivery_days: int | None = Field(None, ge=0)


class ShippingOptionOut(ApiModel):
    id: str
    name: str
    price: Decimal
    delivery_days: int | None = None


# =====================================================
# CART
# =====================================================
class CartItemIn(ApiModel):
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0, description="Ilosc produktu (musi byc > 0)")


class CartQuantityIn(ApiModel):
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=0, description="0 usuwa pozycje z koszyka")


class CartItemOut(ApiModel):
    product_id: str
    quantity: int
    product: ProductOut


class CartOut(ApiModel):
    items: List[CartItemOut]
    total: Decimal


# =====================================================
# CHECKOUT / ORDERS
# =====================================================
class CheckoutIn(ApiModel):
    customer_name: str = Field(..., min_length=1, max_length=200)
    customer_email: EmailStr
    shipping_option_id: str | None = None


class OrderItemOut(ApiModel):
    id: str
    product_id: str | None = None
    product_name: str
    quantity: int
    price: Decimal


class OrderOut(ApiModel):
    id: str
    customer_name: str
    customer_email: str
    status: OrderStatus
    total: Decimal
    shipping_option_id: str | None = None
    shipping_option: ShippingOptionOut | None = None
    items: List[OrderItemOut]
    created_at: datetime


class CheckoutOut(ApiModel):
    order_id: str
    order: OrderOut


class OrderStatusIn(ApiModel):
    status: OrderStatus


# =====================================================
# ADMIN
# =====================================================
class AdminLoginIn(ApiModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class MessageOut(ApiModel):
    success: bool = True
    message: str


class DailySales(ApiModel):
    day: date
    total: Decimal


class DashboardOut(ApiModel):
    today_sales: Decimal
    pending_orders: int
    low_stock_products: int
    total_products: int
    sales_last_7_days: List[DailySales]
