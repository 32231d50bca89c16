# app/data/seed.py
from decimal import Decimal

from app.data.database import SessionLocal
from app.data.models import CategoryModel, ProductModel, ShippingOptionModel
from app.utils.logging import get_logger

logger = get_logger(__name__)

CATEGORIES = [
    ("Keyboards", "keyboards"),
    ("Mice", "mice"),
    ("Monitors", "monitors"),
]

PRODUCTS = [
    ("keyboards", "Mechanical Keyboard", "Hot-swappable switches, aluminium case.", "199.99", 12, True),
    ("mice", "Wireless Mouse", "Lightweight mouse with 70h battery.", "49.50", 40, False),
    ("monitors", "27in Monitor", "1440p IPS panel, 165 Hz.", "899.00", 4, True),
]

SHIPPING_OPTIONS = [
    ("Standard", "9.90", 5),
    ("Express", "24.90", 1),
]


def seed():
    db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(ProductModel).first():
            return

        categories = {}
        for name, slug in CATEGORIES:
            categories[slug] = CategoryModel(name=name, slug=slug)
            db.add(categories[slug])

        for category, name, description, price, stock, featured in PRODUCTS:
            db.add(
                ProductModel(
                    slug=name.lower().replace(" ", "-"),
                    name=name,
                    description=description,
                    price=Decimal(price),
                    stock=stock,
                    images=[],
                    category=categories[category],
                    featured=featured,
                )
            )

        for name, price, days in SHIPPING_OPTIONS:
            db.add(ShippingOptionModel(name=name, price=Decimal(price), delivery_days=days))

        db.commit()
        logger.info(f"Seeded {len(PRODUCTS)} products, {len(SHIPPING_OPTIONS)} shipping options")
    finally:
        db.close()


if __name__ == "__main__":
    from app.main import init_db

    init_db()
    seed()
