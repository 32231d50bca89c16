#app/api/routers/cart.py
import redis
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.orm import Session

from app.api.deps import set_cart_cookie
from app.data.cache import get_redis
from app.data.database import get_db
from app.domain.errors import StoreError
from app.domain.schemas import CartItemIn, CartOut, CartQuantityIn, MessageOut
from app.repos.cart_repo import CartRepo
from app.services.cart_service import CartService, get_or_create_session_id
from app.utils.settings import CART_COOKIE_NAME

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session, client: redis.Redis):
    return CartService(db=db, cart_repo=CartRepo(client))


@router.get("", response_model=CartOut)
def get_cart(
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    client: redis.Redis = Depends(get_redis),
):
    session_id = get_or_create_session_id(request.cookies)
    cart = get_service(db, client).get_cart(session_id)
    set_cart_cookie(response, session_id)
    return CartOut.model_validate(cart)


@router.post("", response_model=CartOut)
def add_item(
    payload: CartItemIn,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    client: redis.Redis = Depends(get_redis),
):
    session_id = get_or_create_session_id(request.cookies)
    svc = get_service(db, client)
    try:
        cart = svc.add_item(session_id, payload.product_id, payload.quantity)
    except StoreError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    set_cart_cookie(response, session_id)
    return CartOut.model_validate(cart)


@router.patch("", response_model=CartOut)
def set_quantity(
    payload: CartQuantityIn,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    client: redis.Redis = Depends(get_redis),
):
    session_id = get_or_create_session_id(request.cookies)
    svc = get_service(db, client)
    try:
        cart = svc.set_quantity(session_id, payload.product_id, payload.quantity)
    except StoreError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    set_cart_cookie(response, session_id)
    return CartOut.model_validate(cart)


@router.delete("", response_model=CartOut)
def remove_item(
    request: Request,
    response: Response,
    product_id: str | None = Query(None, alias="productId"),
    db: Session = Depends(get_db),
    client: redis.Redis = Depends(get_redis),
):
    if not product_id:
        raise HTTPException(status_code=400, detail="Product ID required")

    session_id = get_or_create_session_id(request.cookies)
    cart = get_service(db, client).remove_item(session_id, product_id)
    set_cart_cookie(response, session_id)
    return CartOut.model_validate(cart)


@router.delete("/clear", response_model=MessageOut)
def clear_cart(
    request: Request,
    db: Session = Depends(get_db),
    client: redis.Redis = Depends(get_redis),
):
    get_service(db, client).clear_cart(request.cookies.get(CART_COOKIE_NAME))
    return MessageOut(message="Cart cleared")
