from decimal import Decimal
from typing import Any, Dict
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.user_service import UserService
from storefront.utils.errors import InsufficientStockError, NotFoundError, ServiceError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Per-user cart, one row per (user, product).
    query (get_cart) only reads, commands (add, update, remove, clear) change rows.

    Stock is checked and then written without a lock, two concurrent adds
    for the same product can both pass the check.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)
        self.users = UserService(db)

    # query
    def get_cart(self, user_id: str) -> Dict[str, Any]:
        try:
            lines = self.repo.get_lines(user_id)
        except SQLAlchemyError as e:
            logger.error(f"Error getting cart for user {user_id}: {e}", exc_info=True)
            raise ServiceError("Failed to get cart") from e

        # rows pointing at inactive products are hidden, not deleted
        items = [
            {
                "id": item.id,
                "quantity": item.quantity,
                "created_at": item.created_at,
                "product": product,
            }
            for item, product in lines
            if product is not None and product.is_active
        ]
        total_items = sum(i["quantity"] for i in items)
        total_amount = sum(
            (Decimal(i["product"].price) * i["quantity"] for i in items),
            Decimal("0.00"),
        )

        return {
            "items": items,
            "total_items": total_items,
            "total_amount": format(total_amount, ".2f"),
        }

    # commands
    def add_to_cart(self, user_id: str, product_id: UUID, quantity: int) -> Dict[str, Any]:
        if quantity <= 0:
            raise ValueError("Quantity must be greater than 0")

        try:
            product = self.products.get_active(product_id)
            if not product:
                raise NotFoundError("Product not found or inactive")

            if product.inventory < quantity:
                raise InsufficientStockError(product.inventory)

            existing = self.repo.get_item_for_product(user_id, product_id)

            if existing:
                new_quantity = existing.quantity + quantity
                # combined quantity has to fit as well
                if product.inventory < new_quantity:
                    raise InsufficientStockError(product.inventory, new_quantity)

                logger.info(
                    f"Product {product_id} already in cart of user {user_id}, "
                    f"quantity {existing.quantity} -> {new_quantity}"
                )
                item = self.repo.set_quantity(existing, new_quantity)
                message = "Cart updated successfully"
            else:
                logger.info(f"Adding product {product_id} x{quantity} to cart of user {user_id}")
                self.users.ensure_user(user_id)
                item = self.repo.insert_item(user_id, product_id, quantity)
                message = "Product added to cart successfully"

            self.repo.commit()
            self.repo.refresh(item)
            self.repo.refresh(product)

        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Error adding to cart: {e}", exc_info=True)
            raise ServiceError("Failed to add product to cart") from e

        return {"item": item, "product": product, "message": message}

    def update_cart_item(self, user_id: str, item_id: UUID, quantity: int) -> Dict[str, Any]:
        if quantity < 0:
            raise ValueError("Quantity cannot be negative")

        try:
            row = self.repo.get_owned_item(user_id, item_id)
            # someone else's row looks exactly like a missing one
            if row is None:
                raise NotFoundError("Cart item not found")

            item, product = row

            if quantity == 0:
                logger.info(f"Quantity 0 for cart item {item_id}, removing")
                self.repo.delete_item(item)
                self.repo.commit()
                return {"message": "Product removed from cart successfully", "deleted": True}

            if product is not None and product.inventory < quantity:
                raise InsufficientStockError(product.inventory)

            item = self.repo.set_quantity(item, quantity)
            self.repo.commit()
            self.repo.refresh(item)
            if product is not None:
                self.repo.refresh(product)

        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Error updating cart item {item_id}: {e}", exc_info=True)
            raise ServiceError("Failed to update cart item") from e

        logger.info(f"Cart item {item_id} of user {user_id} set to {quantity}")
        return {"item": item, "product": product, "message": "Cart item updated successfully"}

    def remove_from_cart(self, user_id: str, item_id: UUID) -> Dict[str, Any]:
        try:
            row = self.repo.get_owned_item(user_id, item_id)
            if row is None:
                raise NotFoundError("Cart item not found")

            item = row[0]
            deleted = {
                "id": item.id,
                "user_id": item.user_id,
                "product_id": item.product_id,
                "quantity": item.quantity,
                "created_at": item.created_at,
                "updated_at": item.updated_at,
            }
            self.repo.delete_item(item)
            self.repo.commit()

        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Error removing cart item {item_id}: {e}", exc_info=True)
            raise ServiceError("Failed to remove product from cart") from e

        logger.info(f"Cart item {item_id} removed for user {user_id}")
        return {"message": "Product removed from cart successfully", "deleted_item": deleted}

    def clear_cart(self, user_id: str) -> Dict[str, Any]:
        try:
            count = self.repo.delete_all_for_user(user_id)
            self.repo.commit()
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Error clearing cart of user {user_id}: {e}", exc_info=True)
            raise ServiceError("Failed to clear cart") from e

        logger.info(f"Cleared {count} cart item(s) for user {user_id}")
        return {"message": "Cart cleared successfully", "deleted_count": count}
