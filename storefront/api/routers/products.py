# storefront/api/routers/products.py
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import CategoryOut, ProductDetailOut, ProductFilters, ProductPage
from storefront.services.product_service import ProductService
from storefront.utils.errors import NotFoundError, ServiceError

router = APIRouter(tags=["products"])


def get_service(db: Session):
    return ProductService(db)


@router.get("/products", response_model=ProductPage)
def list_products(
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    featured: Optional[str] = Query(None),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    limit: Optional[str] = Query(None),
    offset: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """
    Active products, filtered and paginated.
    Raw strings are collected here and validated in one go so that every bad
    parameter ends up as a 400 with the same shape.
    """
    raw = {
        "category": category,
        "search": search,
        "min_price": min_price,
        "max_price": max_price,
        "featured": featured,
        "sort_by": sort_by,
        "sort_order": sort_order,
        "limit": limit,
        "offset": offset,
    }
    try:
        filters = ProductFilters(**{k: v for k, v in raw.items() if v is not None})
    except ValidationError as e:
        raise HTTPException(
            status_code=400,
            detail=[{"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]} for err in e.errors()],
        )

    svc = get_service(db)
    try:
        return svc.list_products(filters)
    except ServiceError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/products/{product_id}", response_model=ProductDetailOut)
def get_product(product_id: UUID, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_product(product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ServiceError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/categories", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.list_categories()
    except ServiceError as e:
        raise HTTPException(status_code=500, detail=str(e))
