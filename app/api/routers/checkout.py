# app/api/routers/checkout.py
import redis
from fastapi import APIRouter, Depends, Header, HTTPException, Request, Response
from sqlalchemy.orm import Session

from app.data.cache import get_redis
from app.data.database import get_db
from app.domain.errors import StoreError
from app.domain.schemas import CheckoutIn, CheckoutOut, OrderOut
from app.repos.cart_repo import CartRepo
from app.services.checkout_service import CheckoutService
from app.services.idempotency_service import IdempotencyService
from app.utils.settings import CART_COOKIE_NAME

router = APIRouter(prefix="/checkout", tags=["checkout"])


def get_service(db: Session, client: redis.Redis):
    return CheckoutService(
        db=db,
        cart_repo=CartRepo(client),
        idempotency=IdempotencyService(client),
    )


@router.post("", response_model=CheckoutOut, status_code=201)
def checkout(
    payload: CheckoutIn,
    request: Request,
    response: Response,
    idempotency_key: str | None = Header(None, alias="Idempotency-Key"),
    db: Session = Depends(get_db),
    client: redis.Redis = Depends(get_redis),
):
    """
    Tworzy zamowienie z koszyka sesji (ciasteczko cart-session).
    Ten sam Idempotency-Key zwraca to samo zamowienie (200) zamiast tworzyc nowe.
    """
    svc = get_service(db, client)
    try:
        order = svc.checkout(
            session_id=request.cookies.get(CART_COOKIE_NAME),
            customer_name=payload.customer_name,
            customer_email=payload.customer_email,
            shipping_option_id=payload.shipping_option_id,
            idempotency_key=idempotency_key,
        )
    except StoreError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    if svc.replayed:
        response.status_code = 200
    return CheckoutOut(order_id=order.id, order=OrderOut.model_validate(order))
