# app/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.deps import is_admin, require_admin
from app.data.database import get_db
from app.domain.errors import StoreError
from app.domain.schemas import OrderOut, OrderStatusIn
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.get("", response_model=List[OrderOut])
def list_orders(
    email: str | None = Query(None),
    status: str | None = Query(None),
    admin: bool = Depends(is_admin),
    db: Session = Depends(get_db),
):
    """
    Admin widzi wszystkie zamówienia (opcjonalnie filtr po email),
    klient musi podać email.
    """
    svc = get_service(db)
    try:
        orders = svc.list_orders(email=email, status=status, is_admin=admin)
    except StoreError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return [OrderOut.model_validate(o) for o in orders]


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: str, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return OrderOut.model_validate(svc.get_order(order_id))
    except StoreError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.patch("/{order_id}/status", response_model=OrderOut, dependencies=[Depends(require_admin)])
def update_order_status(order_id: str, payload: OrderStatusIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return OrderOut.model_validate(svc.update_status(order_id, payload.status.value))
    except StoreError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
