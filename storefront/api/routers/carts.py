# storefront/api/routers/carts.py
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import (
    AddToCartIn,
    CartClearOut,
    CartMutationOut,
    CartOut,
    CartRemovalOut,
    UpdateCartItemIn,
)
from storefront.services.cart_service import CartService
from storefront.utils.errors import InsufficientStockError, NotFoundError, ServiceError

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


def _to_http(e: Exception) -> HTTPException:
    # stock first, it is a ValueError too
    if isinstance(e, InsufficientStockError):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, ValueError):
        return HTTPException(status_code=400, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))


@router.get("/{user_id}", response_model=CartOut)
def get_cart(user_id: str, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_cart(user_id)
    except ServiceError as e:
        raise _to_http(e)


@router.post("/{user_id}", response_model=CartMutationOut)
def add_to_cart(user_id: str, payload: AddToCartIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.add_to_cart(user_id, payload.product_id, payload.quantity)
    except (ValueError, NotFoundError, ServiceError) as e:
        raise _to_http(e)


@router.put("/{user_id}/items/{item_id}", response_model=CartMutationOut)
def update_cart_item(
    user_id: str,
    item_id: UUID,
    payload: UpdateCartItemIn,
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_cart_item(user_id, item_id, payload.quantity)
    except (ValueError, NotFoundError, ServiceError) as e:
        raise _to_http(e)


@router.delete("/{user_id}/items/{item_id}", response_model=CartRemovalOut)
def remove_from_cart(user_id: str, item_id: UUID, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.remove_from_cart(user_id, item_id)
    except (NotFoundError, ServiceError) as e:
        raise _to_http(e)


@router.delete("/{user_id}", response_model=CartClearOut)
def clear_cart(user_id: str, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.clear_cart(user_id)
    except ServiceError as e:
        raise _to_http(e)
