# storefront/api/routers/orders.py
from fastapi import APIRouter

from storefront.domain.schemas import MessageOut

router = APIRouter(prefix="/orders", tags=["orders"])


# checkout is not built yet, the tables exist for it
@router.get("", response_model=MessageOut)
def list_orders():
    return {"message": "Orders endpoint - coming soon"}


@router.post("", response_model=MessageOut)
def create_order():
    return {"message": "Create order endpoint - coming soon"}
