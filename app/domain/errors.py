# app/domain/errors.py


class StoreError(Exception):
    """Bazowy blad domeny; status_code mapowany na odpowiedz HTTP w routerach."""

    status_code = 500


class NotFound(StoreError):
    status_code = 404


class ValidationError(StoreError):
    status_code = 400


class InsufficientStock(StoreError):
    status_code = 400

    def __init__(self, product_id: str, available: int, requested: int, name: str | None = None):
        self.product_id = product_id
        self.available = available
        self.requested = requested
        label = name or product_id
        super().__init__(
            f"Insufficient stock for {label}: requested {requested}, available {available}"
        )


class EmptyCart(StoreError):
    status_code = 400

    def __init__(self, message: str = "Cart is empty"):
        super().__init__(message)


class ProductNotFound(StoreError):
    """Produkt z koszyka zniknal przed checkoutem."""

    status_code = 400

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


class Oversold(StoreError):
    status_code = 409

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product {product_id} sold out while checking out")


class CheckoutInProgress(StoreError):
    status_code = 409

    def __init__(self, key: str):
        self.key = key
        super().__init__("A checkout with this idempotency key is already in progress")


class Unauthorized(StoreError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class Unavailable(StoreError):
    status_code = 503
