# app/repos/product_repo.py
from decimal import Decimal
from typing import Dict, Iterable, List

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session, selectinload

from app.data.models.category import CategoryModel
from app.data.models.product import ProductModel
from app.data.models.shipping_option import ShippingOptionModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: str) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_product_by_slug(self, slug: str) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel).where(ProductModel.slug == slug)
        ).scalar_one_or_none()

    def get_products(self, product_ids: Iterable[str]) -> Dict[str, ProductModel]:
        ids = list(set(product_ids))
        if not ids:
            return {}
        rows = self.db.execute(
            select(ProductModel).where(ProductModel.id.in_(ids))
        ).scalars().all()
        return {p.id: p for p in rows}

    def list_products(
        self,
        category_id: str | None = None,
        search: str | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
        featured: bool | None = None,
    ) -> List[ProductModel]:
        stmt = select(ProductModel).options(selectinload(ProductModel.category))

        if category_id:
            stmt = stmt.where(ProductModel.category_id == category_id)
        if search:
            pattern = f"%{search.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(ProductModel.name).like(pattern),
                    func.lower(func.coalesce(ProductModel.description, "")).like(pattern),
                )
            )
        if min_price is not None:
            stmt = stmt.where(ProductModel.price >= min_price)
        if max_price is not None:
            stmt = stmt.where(ProductModel.price <= max_price)
        if featured:
            stmt = stmt.where(ProductModel.featured.is_(True))

        stmt = stmt.order_by(ProductModel.created_at.desc())
        return list(self.db.execute(stmt).scalars().all())

    def slug_taken(self, slug: str, exclude_id: str | None = None) -> bool:
        stmt = select(ProductModel.id).where(ProductModel.slug == slug)
        if exclude_id:
            stmt = stmt.where(ProductModel.id != exclude_id)
        return self.db.execute(stmt).first() is not None

    def add_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def save(self, product: ProductModel) -> ProductModel:
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.commit()

    def decrement_stock(self, product_id: str, quantity: int) -> int:
        """
        Warunkowy UPDATE (compare-and-swap na poziomie bazy):
        UPDATE products SET stock = stock - q WHERE id = ? AND stock >= q
        Zwraca liczbe zmienionych wierszy, 0 oznacza ze ktos nas wyprzedzil.
        Nie commituje, wywolujacy trzyma transakcje.
        """
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock >= quantity)
            .values(stock=ProductModel.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def count_products(self) -> int:
        return self.db.execute(select(func.count(ProductModel.id))).scalar_one()

    def count_low_stock(self, threshold: int) -> int:
        return self.db.execute(
            select(func.count(ProductModel.id)).where(
                ProductModel.stock > 0, ProductModel.stock < threshold
            )
        ).scalar_one()


class CatalogRepo:
    """Kategorie i opcje wysylki, proste slowniki."""

    def __init__(self, db: Session):
        self.db = db

    def get_category(self, category_id: str) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def list_categories(self) -> List[CategoryModel]:
        return list(
            self.db.execute(select(CategoryModel).order_by(CategoryModel.name)).scalars().all()
        )

    def category_slug_taken(self, slug: str) -> bool:
        return self.db.execute(
            select(CategoryModel.id).where(CategoryModel.slug == slug)
        ).first() is not None

    def add_category(self, category: CategoryModel) -> CategoryModel:
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category

    def get_shipping_option(self, option_id: str) -> ShippingOptionModel | None:
        return self.db.get(ShippingOptionModel, option_id)

    def list_shipping_options(self) -> List[ShippingOptionModel]:
        return list(
            self.db.execute(
                select(ShippingOptionModel).order_by(ShippingOptionModel.price)
            ).scalars().all()
        )

    def add_shipping_option(self, option: ShippingOptionModel) -> ShippingOptionModel:
        self.db.add(option)
        self.db.commit()
        self.db.refresh(option)
        return option
