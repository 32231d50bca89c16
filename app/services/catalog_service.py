# app/services/catalog_service.py
import re
import unicodedata
from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session

from app.data.models.category import CategoryModel
from app.data.models.product import ProductModel
from app.data.models.shipping_option import ShippingOptionModel
from app.domain.errors import NotFound, ValidationError
from app.domain.schemas import CategoryIn, ProductCreate, ProductUpdate, ShippingOptionIn
from app.repos.product_repo import CatalogRepo, ProductRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


def generate_slug(text: str) -> str:
    normalized = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", normalized.lower()).strip("-")
    return slug or "item"


class CatalogService:
    """
    Zapytania o produkty (filtry) i zarzadzanie katalogiem przez admina.
    """

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)
        self.catalog = CatalogRepo(db)

    #query
    def list_products(
        self,
        category_id: str | None = None,
        search: str | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
        featured: bool | None = None,
    ) -> List[ProductModel]:
        return self.repo.list_products(
            category_id=category_id,
            search=search,
            min_price=min_price,
            max_price=max_price,
            featured=featured,
        )

    def get_product(self, product_id: str) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFound("Product not found")
        return product

    def get_product_by_slug(self, slug: str) -> ProductModel:
        product = self.repo.get_product_by_slug(slug)
        if not product:
            raise NotFound("Product not found")
        return product

    def list_categories(self) -> List[CategoryModel]:
        return self.catalog.list_categories()

    def list_shipping_options(self) -> List[ShippingOptionModel]:
        return self.catalog.list_shipping_options()

    #commands (admin)
    def create_product(self, payload: ProductCreate) -> ProductModel:
        data = payload.model_dump()
        slug = data.pop("slug") or generate_slug(payload.name)

        if self.repo.slug_taken(slug):
            raise ValidationError("Product with this slug already exists")
        self._check_category(data.get("category_id"))

        product = self.repo.add_product(ProductModel(slug=slug, **data))
        logger.info(f"Utworzono produkt {product.id} ({slug})")
        return product

    def update_product(self, product_id: str, payload: ProductUpdate) -> ProductModel:
        product = self.get_product(product_id)
        data = payload.model_dump(exclude_unset=True)

        # nowa nazwa bez podanego sluga -> nowy slug
        if data.get("name") and not data.get("slug"):
            data["slug"] = generate_slug(data["name"])

        if data.get("slug") and self.repo.slug_taken(data["slug"], exclude_id=product_id):
            raise ValidationError("Product with this slug already exists")
        if "category_id" in data:
            self._check_category(data["category_id"])

        for name, value in data.items():
            if value is None and name not in ("description", "category_id", "seo_title", "seo_description"):
                continue
            setattr(product, name, value)

        product = self.repo.save(product)
        logger.info(f"Zaktualizowano produkt {product_id}")
        return product

    def delete_product(self, product_id: str) -> None:
        product = self.get_product(product_id)
        self.repo.delete_product(product)
        logger.info(f"Usunieto produkt {product_id}")

    def create_category(self, payload: CategoryIn) -> CategoryModel:
        slug = payload.slug or generate_slug(payload.name)
        if self.catalog.category_slug_taken(slug):
            raise ValidationError("Category with this slug already exists")
        return self.catalog.add_category(CategoryModel(name=payload.name, slug=slug))

    def create_shipping_option(self, payload: ShippingOptionIn) -> ShippingOptionModel:
        return self.catalog.add_shipping_option(ShippingOptionModel(**payload.model_dump()))

    def _check_category(self, category_id: str | None) -> None:
        if category_id and not self.catalog.get_category(category_id):
            raise NotFound("Category not found")
