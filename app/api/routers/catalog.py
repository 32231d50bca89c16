# app/api/routers/catalog.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import require_admin
from app.data.database import get_db
from app.domain.errors import StoreError
from app.domain.schemas import CategoryIn, CategoryOut, ShippingOptionIn, ShippingOptionOut
from app.services.catalog_service import CatalogService

router = APIRouter(tags=["catalog"])


@router.get("/categories", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return [CategoryOut.model_validate(c) for c in CatalogService(db).list_categories()]


@router.post(
    "/categories",
    response_model=CategoryOut,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
def create_category(payload: CategoryIn, db: Session = Depends(get_db)):
    try:
        return CategoryOut.model_validate(CatalogService(db).create_category(payload))
    except StoreError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/shipping-options", response_model=List[ShippingOptionOut])
def list_shipping_options(db: Session = Depends(get_db)):
    return [ShippingOptionOut.model_validate(o) for o in CatalogService(db).list_shipping_options()]


@router.post(
    "/shipping-options",
    response_model=ShippingOptionOut,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
def create_shipping_option(payload: ShippingOptionIn, db: Session = Depends(get_db)):
    return ShippingOptionOut.model_validate(CatalogService(db).create_shipping_option(payload))
