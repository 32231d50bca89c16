# app/services/admin_service.py
import secrets
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Dict, Any

from sqlalchemy.orm import Session

from app.data.models.order import OrderStatus
from app.domain.errors import Unauthorized
from app.repos.order_repo import OrderRepo
from app.repos.product_repo import ProductRepo
from app.utils import settings
from app.utils.logging import get_logger

logger = get_logger(__name__)


def check_credentials(email: str, password: str) -> None:
    """Wspolny sekret z env, bez kont uzytkownikow."""
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        logger.warning("ADMIN_EMAIL/ADMIN_PASSWORD nie ustawione, logowanie admina wylaczone")
        raise Unauthorized("Invalid credentials")

    # EmailStr normalizuje domene, porownujemy bez wielkosci liter
    email_ok = secrets.compare_digest(
        email.strip().lower().encode(), settings.ADMIN_EMAIL.strip().lower().encode()
    )
    password_ok = secrets.compare_digest(password.encode(), settings.ADMIN_PASSWORD.encode())
    if not (email_ok and password_ok):
        raise Unauthorized("Invalid credentials")


def is_admin_token(token: str | None) -> bool:
    if not token:
        return False
    return secrets.compare_digest(token.encode(), settings.ADMIN_SESSION_TOKEN.encode())


class DashboardService:
    def __init__(self, db: Session):
        self.orders = OrderRepo(db)
        self.products = ProductRepo(db)

    def stats(self, now: datetime | None = None) -> Dict[str, Any]:
        now = now or datetime.now(timezone.utc)
        today = now.date()
        first_day = today - timedelta(days=6)
        since = datetime(first_day.year, first_day.month, first_day.day, tzinfo=timezone.utc)

        days = {first_day + timedelta(days=i): Decimal("0.00") for i in range(7)}
        for order in self.orders.orders_since(since):
            created = order.created_at
            if created.tzinfo:
                created = created.astimezone(timezone.utc)
            day = created.date()
            if day in days:
                days[day] += order.total

        return {
            "today_sales": days[today],
            "pending_orders": self.orders.count_by_status(OrderStatus.PENDING),
            "low_stock_products": self.products.count_low_stock(settings.LOW_STOCK_THRESHOLD),
            "total_products": self.products.count_products(),
            "sales_last_7_days": [{"day": d, "total": t} for d, t in days.items()],
        }
