import secrets
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Mapping

from sqlalchemy.orm import Session

from app.data.models.product import ProductModel
from app.domain.errors import InsufficientStock, NotFound, ValidationError
from app.repos.cart_repo import CartLine, CartRepo
from app.repos.product_repo import ProductRepo
from app.utils.settings import CART_COOKIE_NAME
from app.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class HydratedLine:
    product_id: str
    quantity: int
    product: ProductModel


@dataclass
class HydratedCart:
    items: List[HydratedLine] = field(default_factory=list)
    total: Decimal = Decimal("0.00")


def new_session_id() -> str:
    return secrets.token_urlsafe(16)


def get_or_create_session_id(cookies: Mapping[str, str]) -> str:
    """Id sesji z ciasteczka albo nowy losowy token (kryptograficznie silny)."""
    session_id = cookies.get(CART_COOKIE_NAME)
    if session_id:
        return session_id
    return new_session_id()


class CartService:
    """
    Koszyk anonimowy, trzymany w Redis i adresowany id sesji.
    query (get_cart) laczy pozycje z aktualnymi produktami z bazy,
    ceny nigdy nie sa cache'owane w koszyku.
    """

    def __init__(self, db: Session, cart_repo: CartRepo):
        self.products = ProductRepo(db)
        self.repo = cart_repo

    #query - odczyt
    def get_cart(self, session_id: str | None) -> HydratedCart:
        if not session_id:
            return HydratedCart()

        lines = self.repo.get_lines(session_id)
        if not lines:
            return HydratedCart()

        products = self.products.get_products(l.product_id for l in lines)

        items = []
        for line in lines:
            product = products.get(line.product_id)
            if product is None:
                logger.warning(
                    f"Pomijam pozycje koszyka {session_id}: produkt {line.product_id} nie istnieje"
                )
                continue
            items.append(HydratedLine(line.product_id, line.quantity, product))

        total = sum((i.product.price * i.quantity for i in items), Decimal("0.00"))
        return HydratedCart(items=items, total=total)

    #commands
    def add_item(self, session_id: str, product_id: str, quantity: int) -> HydratedCart:
        if quantity < 1:
            raise ValidationError("Quantity must be greater than 0")

        product = self._require_product(product_id)
        # sprawdzamy tylko ilosc z zadania, scalona ilosc weryfikuje checkout
        if quantity > product.stock:
            raise InsufficientStock(product_id, product.stock, quantity, product.name)

        def _merge(lines: List[CartLine]) -> List[CartLine]:
            existing = next((l for l in lines if l.product_id == product_id), None)
            if existing:
                logger.info(
                    f"Produkt {product_id} juz jest w koszyku {session_id}, zwiekszam ilosc "
                    f"z {existing.quantity} do {existing.quantity + quantity}"
                )
                existing.quantity += quantity
            else:
                logger.info(f"Dodaje produkt {product_id} do koszyka {session_id}")
                lines.append(CartLine(product_id=product_id, quantity=quantity))
            return lines

        self.repo.update_lines(session_id, _merge)
        return self.get_cart(session_id)

    def remove_item(self, session_id: str, product_id: str) -> HydratedCart:
        logger.info(f"Usuwanie produktu {product_id} z koszyka {session_id}")

        def _remove(lines: List[CartLine]) -> List[CartLine]:
            return [l for l in lines if l.product_id != product_id]

        self.repo.update_lines(session_id, _remove)
        return self.get_cart(session_id)

    def set_quantity(self, session_id: str, product_id: str, quantity: int) -> HydratedCart:
        """
        Ustawia ilosc jednym zapisem (upsert po product_id), pozycja nie znika
        chwilowo z koszyka. quantity < 1 usuwa pozycje.
        """
        if quantity < 1:
            return self.remove_item(session_id, product_id)

        product = self._require_product(product_id)
        if quantity > product.stock:
            raise InsufficientStock(product_id, product.stock, quantity, product.name)

        def _upsert(lines: List[CartLine]) -> List[CartLine]:
            for line in lines:
                if line.product_id == product_id:
                    line.quantity = quantity
                    return lines
            lines.append(CartLine(product_id=product_id, quantity=quantity))
            return lines

        self.repo.update_lines(session_id, _upsert)
        logger.info(f"Ilosc produktu {product_id} w koszyku {session_id} ustawiona na {quantity}")
        return self.get_cart(session_id)

    def clear_cart(self, session_id: str | None) -> None:
        if session_id:
            self.repo.delete(session_id)

    def _require_product(self, product_id: str) -> ProductModel:
        product = self.products.get_product(product_id)
        if not product:
            raise NotFound("Product not found")
        return product
