# storefront/repos/cart_repo.py
from datetime import datetime, timezone
from typing import Sequence
from uuid import UUID

from sqlalchemy import Row, delete, select
from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.product import ProductModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_lines(self, user_id: str) -> Sequence[Row]:
        """(item, product) rows, product is None when the join misses."""
        stmt = (
            select(CartItemModel, ProductModel)
            .outerjoin(ProductModel, CartItemModel.product_id == ProductModel.id)
            .where(CartItemModel.user_id == user_id)
            .order_by(CartItemModel.created_at)
        )
        return self.db.execute(stmt).all()

    def get_item_for_product(self, user_id: str, product_id: UUID) -> CartItemModel | None:
        stmt = select(CartItemModel).where(
            CartItemModel.user_id == user_id,
            CartItemModel.product_id == product_id,
        ).limit(1)
        return self.db.execute(stmt).scalars().first()

    def get_owned_item(self, user_id: str, item_id: UUID):
        """(item, product) if the row exists AND belongs to the user, else None."""
        stmt = (
            select(CartItemModel, ProductModel)
            .outerjoin(ProductModel, CartItemModel.product_id == ProductModel.id)
            .where(CartItemModel.id == item_id, CartItemModel.user_id == user_id)
            .limit(1)
        )
        return self.db.execute(stmt).first()

    def insert_item(self, user_id: str, product_id: UUID, quantity: int) -> CartItemModel:
        now = datetime.now(timezone.utc)
        item = CartItemModel(
            user_id=user_id,
            product_id=product_id,
            quantity=quantity,
            created_at=now,
            updated_at=now,
        )
        self.db.add(item)
        self.db.flush()
        return item

    def set_quantity(self, item: CartItemModel, quantity: int) -> CartItemModel:
        item.quantity = quantity
        item.updated_at = datetime.now(timezone.utc)
        self.db.add(item)
        self.db.flush()
        return item

    def delete_item(self, item: CartItemModel) -> None:
        self.db.delete(item)
        self.db.flush()

    def delete_all_for_user(self, user_id: str) -> int:
        result = self.db.execute(delete(CartItemModel).where(CartItemModel.user_id == user_id))
        return result.rowcount or 0

    def commit(self):
        self.db.commit()

    def refresh(self, obj):
        self.db.refresh(obj)

    def rollback(self):
        self.db.rollback()
