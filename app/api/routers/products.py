# app/api/routers/products.py
from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.deps import require_admin
from app.data.database import get_db
from app.domain.errors import StoreError
from app.domain.schemas import MessageOut, ProductCreate, ProductOut, ProductUpdate
from app.services.catalog_service import CatalogService

router = APIRouter(prefix="/products", tags=["products"])


def get_service(db: Session):
    return CatalogService(db)


@router.get("", response_model=List[ProductOut])
def list_products(
    category_id: str | None = Query(None, alias="categoryId"),
    search: str | None = Query(None),
    min_price: Decimal | None = Query(None, alias="minPrice"),
    max_price: Decimal | None = Query(None, alias="maxPrice"),
    featured: bool | None = Query(None),
    db: Session = Depends(get_db),
):
    products = get_service(db).list_products(
        category_id=category_id,
        search=search,
        min_price=min_price,
        max_price=max_price,
        featured=featured,
    )
    return [ProductOut.model_validate(p) for p in products]


@router.get("/slug/{slug}", response_model=ProductOut)
def get_product_by_slug(slug: str, db: Session = Depends(get_db)):
    try:
        return ProductOut.model_validate(get_service(db).get_product_by_slug(slug))
    except StoreError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: str, db: Session = Depends(get_db)):
    try:
        return ProductOut.model_validate(get_service(db).get_product(product_id))
    except StoreError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("", response_model=ProductOut, status_code=201, dependencies=[Depends(require_admin)])
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    try:
        return ProductOut.model_validate(get_service(db).create_product(payload))
    except StoreError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.put("/{product_id}", response_model=ProductOut, dependencies=[Depends(require_admin)])
def update_product(product_id: str, payload: ProductUpdate, db: Session = Depends(get_db)):
    try:
        return ProductOut.model_validate(get_service(db).update_product(product_id, payload))
    except StoreError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.delete("/{product_id}", response_model=MessageOut, dependencies=[Depends(require_admin)])
def delete_product(product_id: str, db: Session = Depends(get_db)):
    try:
        get_service(db).delete_product(product_id)
    except StoreError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return MessageOut(message="Product deleted")
