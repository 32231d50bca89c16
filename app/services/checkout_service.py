# app/services/checkout_service.py
from decimal import Decimal
from enum import Enum
from typing import Dict, List

from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.data.models.order import OrderModel, OrderStatus
from app.data.models.order_item import OrderItemModel
from app.data.models.product import ProductModel
from app.domain.errors import (
    CheckoutInProgress,
    EmptyCart,
    InsufficientStock,
    Oversold,
    ProductNotFound,
    StoreError,
)
from app.repos.cart_repo import CartLine, CartRepo
from app.repos.order_repo import OrderRepo
from app.repos.product_repo import CatalogRepo, ProductRepo
from app.services.idempotency_service import PENDING, IdempotencyService
from app.services.notification_service import NotificationService
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CheckoutState(str, Enum):
    VALIDATING_CART = "VALIDATING_CART"
    VALIDATING_STOCK = "VALIDATING_STOCK"
    COMPUTING_TOTAL = "COMPUTING_TOTAL"
    PERSISTING_ORDER = "PERSISTING_ORDER"
    DECREMENTING_STOCK = "DECREMENTING_STOCK"
    CLEARING_CART = "CLEARING_CART"
    DONE = "DONE"
    ABORTED = "ABORTED"


class CheckoutService:
    """
    Zamiana koszyka (Redis) na zamowienie (baza).

    1. Wczytuje koszyk, pusty lub brak koszyka -> EmptyCart
    2. Pobiera produkty jednym zapytaniem, brak produktu -> ProductNotFound
    3. Sprawdza stany magazynowe -> InsufficientStock
    4. Liczy total (+ wysylka jesli opcja istnieje)
    5. W jednej transakcji: zamowienie + pozycje + warunkowe zmniejszenie stock,
       0 zmienionych wierszy -> rollback i Oversold
    6. Czysci koszyk (blad Redis tutaj nie wycofuje zamowienia)

    Jeden obiekt na jedno wywolanie checkout, stan jest widoczny w `state`.
    """

    def __init__(
        self,
        db: Session,
        cart_repo: CartRepo,
        idempotency: IdempotencyService | None = None,
        notifier: NotificationService | None = None,
    ):
        self.db = db
        self.carts = cart_repo
        self.products = ProductRepo(db)
        self.catalog = CatalogRepo(db)
        self.orders = OrderRepo(db)
        self.idempotency = idempotency
        self.notifier = notifier or NotificationService()

        self.state = CheckoutState.VALIDATING_CART
        self.abort_reason: StoreError | None = None
        self.replayed = False

    def checkout(
        self,
        session_id: str | None,
        customer_name: str,
        customer_email: str,
        shipping_option_id: str | None = None,
        idempotency_key: str | None = None,
    ) -> OrderModel:
        # bez sesji nie ma koszyka, _checkout i tak zakonczy sie EmptyCart
        if not (idempotency_key and self.idempotency and session_id):
            return self._checkout(session_id, customer_name, customer_email, shipping_option_id)

        order = self._replay(session_id, idempotency_key)
        if order:
            return order

        if not self.idempotency.reserve(session_id, idempotency_key):
            # rownolegly checkout mogl skonczyc miedzy lookup a reserve
            order = self._replay(session_id, idempotency_key)
            if order:
                return order
            raise CheckoutInProgress(idempotency_key)

        try:
            order = self._checkout(session_id, customer_name, customer_email, shipping_option_id)
        except Exception:
            self.idempotency.release(session_id, idempotency_key)
            raise

        try:
            self.idempotency.complete(session_id, idempotency_key, order.id)
        except RedisError as e:
            # zamowienie jest zapisane, rezerwacja "pending" wygasnie po krotkim TTL
            logger.warning(f"Nie udalo sie zapisac klucza {idempotency_key} dla zamowienia {order.id}: {e}")
        return order

    def _replay(self, session_id: str, idempotency_key: str) -> OrderModel | None:
        previous = self.idempotency.lookup(session_id, idempotency_key)
        if not previous or previous == PENDING:
            return None
        order = self.orders.get_order(previous)
        if order:
            logger.info(f"Powtorzony checkout z kluczem {idempotency_key}, zamowienie {order.id}")
            self.replayed = True
            self.state = CheckoutState.DONE
        return order

    def _checkout(
        self,
        session_id: str | None,
        customer_name: str,
        customer_email: str,
        shipping_option_id: str | None,
    ) -> OrderModel:
        self._enter(CheckoutState.VALIDATING_CART)
        lines = self.carts.get_lines(session_id) if session_id else []
        if not lines:
            raise self._abort(EmptyCart())

        self._enter(CheckoutState.VALIDATING_STOCK)
        products = self.products.get_products(l.product_id for l in lines)
        self._validate_stock(lines, products)

        self._enter(CheckoutState.COMPUTING_TOTAL)
        total = sum(
            (products[l.product_id].price * l.quantity for l in lines), Decimal("0.00")
        )

        shipping = None
        if shipping_option_id:
            shipping = self.catalog.get_shipping_option(shipping_option_id)
            if shipping:
                total += shipping.price
            else:
                logger.warning(f"Opcja wysylki {shipping_option_id} nie istnieje, pomijam")

        order = OrderModel(
            customer_name=customer_name,
            customer_email=customer_email,
            status=OrderStatus.PENDING.value,
            total=total,
            shipping_option_id=shipping.id if shipping else None,
            items=[
                OrderItemModel(
                    position=position,
                    product_id=line.product_id,
                    product_name=products[line.product_id].name,
                    quantity=line.quantity,
                    price=products[line.product_id].price,
                )
                for position, line in enumerate(lines)
            ],
        )

        self._persist(order, lines)
        logger.info(f"Zamowienie {order.id} utworzone z koszyka {session_id}, total {total}")

        self._enter(CheckoutState.CLEARING_CART)
        try:
            self.carts.delete(session_id)
        except RedisError as e:
            # zamowienie jest juz zapisane, koszyk wygasnie sam (TTL) albo zostanie wyczyszczony recznie
            logger.warning(f"Nie udalo sie wyczyscic koszyka {session_id} po zamowieniu {order.id}: {e}")

        self.notifier.send_order_confirmation(order.id, order.customer_email, str(order.total))

        self._enter(CheckoutState.DONE)
        return order

    def _validate_stock(self, lines: List[CartLine], products: Dict[str, ProductModel]) -> None:
        for line in lines:
            product = products.get(line.product_id)
            if product is None:
                raise self._abort(ProductNotFound(line.product_id))
            if product.stock < line.quantity:
                raise self._abort(
                    InsufficientStock(line.product_id, product.stock, line.quantity, product.name)
                )

    def _persist(self, order: OrderModel, lines: List[CartLine]) -> None:
        """
        Zamowienie i zmniejszenie stock w jednej transakcji.
        UPDATE ... WHERE stock >= q rozstrzyga wyscig rownoleglych checkoutow,
        kolejnosc po product_id zeby transakcje blokowaly wiersze w tej samej kolejnosci.
        """
        self._enter(CheckoutState.PERSISTING_ORDER)
        try:
            self.orders.add_order(order)

            self._enter(CheckoutState.DECREMENTING_STOCK)
            for line in sorted(lines, key=lambda l: l.product_id):
                if self.products.decrement_stock(line.product_id, line.quantity) == 0:
                    raise Oversold(line.product_id)

            self.db.commit()
        except Oversold as e:
            self.db.rollback()
            raise self._abort(e)
        except SQLAlchemyError:
            self.db.rollback()
            self.state = CheckoutState.ABORTED
            raise

    def _enter(self, state: CheckoutState) -> None:
        logger.debug(f"Checkout: {self.state.value} -> {state.value}")
        self.state = state

    def _abort(self, error: StoreError) -> StoreError:
        logger.warning(f"Checkout przerwany w stanie {self.state.value}: {error}")
        self.state = CheckoutState.ABORTED
        self.abort_reason = error
        return error
