# storefront/services/assistant_tools.py
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, NamedTuple, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.domain.schemas import ProductBrief
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.cart_service import CartService
from storefront.utils.errors import InsufficientStockError, NotFoundError, ServiceError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# tool arguments arrive in camelCase, python methods take snake_case
_ARG_NAMES = {
    "productName": "product_name",
    "productId": "product_id",
    "minPrice": "min_price",
    "maxPrice": "max_price",
}

ADD_FAILED = "Ошибка при добавлении товара в корзину"
BAD_QUANTITY = "Количество должно быть целым числом больше 0"
BAD_SEARCH = "Некорректные параметры поиска"


class Operation(NamedTuple):
    name: str
    args: Optional[Dict[str, Any]] = None


def _number(value) -> Decimal:
    # LLM arguments can be numbers or strings, bools are rejected
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Not a number: {value!r}") from None
    if not number.is_finite():
        raise ValueError(f"Not a number: {value!r}")
    return number


def _quantity(value) -> int:
    number = _number(value)
    if number != number.to_integral_value() or number <= 0:
        raise ValueError(f"Not a positive whole quantity: {value!r}")
    return int(number)


def _brief(product) -> Dict[str, Any]:
    return ProductBrief.model_validate(product).model_dump(mode="json", by_alias=True)


class AssistantTools:
    """
    Catalog and cart operations the assistant is allowed to run for one user.
    Every operation returns a JSON-safe dict with a user facing `message`;
    failures end up in the result, nothing is raised to the caller.
    """

    def __init__(self, db: Session, user_id: str):
        self.user_id = user_id
        self.products = ProductRepo(db)
        self.carts = CartRepo(db)
        self.cart_service = CartService(db)

    def execute(self, op: Operation) -> Dict[str, Any]:
        handler = {
            "search_products": self.search_products,
            "search_and_add_to_cart": self.search_and_add_to_cart,
            "add_to_cart": self.add_to_cart,
            "get_cart_info": self.get_cart_info,
        }.get(op.name)

        if handler is None:
            logger.warning(f"Unknown assistant function: {op.name}")
            return {"error": "Unknown function"}

        kwargs = {_ARG_NAMES.get(k, k): v for k, v in (op.args or {}).items()}
        logger.info(f"Assistant calling {op.name} for user {self.user_id}: {kwargs}")
        try:
            return handler(**kwargs)
        except (TypeError, ValueError, ArithmeticError) as e:
            logger.warning(f"Bad arguments for {op.name}: {e}")
            return {"success": False, "error": "Invalid arguments"}

    def search_products(
        self,
        query: str | None = None,
        category: str | None = None,
        min_price=None,
        max_price=None,
        featured: bool | None = None,
        limit: int = 10,
    ) -> Dict[str, Any]:
        try:
            min_price = _number(min_price) if min_price is not None else None
            max_price = _number(max_price) if max_price is not None else None
        except ValueError as e:
            logger.warning(f"Bad price bounds from assistant: {e}")
            return {"products": [], "count": 0, "message": BAD_SEARCH}

        try:
            found = self.products.search(
                query=query,
                category=category,
                min_price=min_price,
                max_price=max_price,
                featured=featured,
                limit=limit,
            )
        except SQLAlchemyError as e:
            logger.error(f"Error searching products: {e}", exc_info=True)
            return {"products": [], "count": 0, "message": "Ошибка при поиске товаров"}

        products = [_brief(p) for p in found]
        return {
            "products": products,
            "count": len(products),
            "message": (
                f"Найдено {len(products)} товар(ов)"
                if products
                else "Товары по вашему запросу не найдены"
            ),
        }

    def search_and_add_to_cart(self, product_name: str, quantity: int = 1) -> Dict[str, Any]:
        try:
            quantity = _quantity(quantity)
        except ValueError as e:
            logger.warning(f"Bad quantity from assistant: {e}")
            return {"success": False, "message": BAD_QUANTITY}

        try:
            product = self.products.find_active_by_name(product_name)
        except SQLAlchemyError as e:
            logger.error(f"Error looking up {product_name!r}: {e}", exc_info=True)
            return {"success": False, "message": ADD_FAILED}

        if product is None:
            return {
                "success": False,
                "message": f'Товар "{product_name}" не найден. Попробуйте другое название.',
            }

        try:
            added = self.cart_service.add_to_cart(self.user_id, product.id, quantity)
        except InsufficientStockError as e:
            if e.requested is None:
                message = f'Недостаточно товара "{product.name}" на складе. Доступно: {e.available} шт.'
            else:
                message = (
                    f"Недостаточно товара на складе. Доступно: {e.available}, "
                    f"в корзине: {e.requested - quantity}"
                )
            return {"success": False, "message": message}
        except (ValueError, NotFoundError, ServiceError):
            return {"success": False, "message": ADD_FAILED}

        item = added["item"]
        price = format(product.price, ".2f")
        if item.quantity > quantity:
            message = f'"{product.name}" добавлен в корзину! Теперь у вас {item.quantity} шт.'
        else:
            message = f'"{product.name}" добавлен в корзину! ({quantity} шт. по ${price})'

        return {
            "success": True,
            "message": message,
            "product": product.name,
            "quantity": item.quantity,
            "price": price,
        }

    def add_to_cart(self, product_id, quantity: int = 1) -> Dict[str, Any]:
        try:
            quantity = _quantity(quantity)
        except ValueError as e:
            logger.warning(f"Bad quantity from assistant: {e}")
            return {"success": False, "message": BAD_QUANTITY}

        try:
            product_uuid = UUID(str(product_id))
        except ValueError:
            return {"success": False, "message": "Товар не найден или недоступен"}

        try:
            added = self.cart_service.add_to_cart(self.user_id, product_uuid, quantity)
        except NotFoundError:
            return {"success": False, "message": "Товар не найден или недоступен"}
        except InsufficientStockError as e:
            message = f"Недостаточно товара на складе. Доступно: {e.available} шт."
            if e.requested is not None:
                message += f", в корзине: {e.requested - quantity} шт."
            return {"success": False, "message": message}
        except (ValueError, ServiceError):
            return {"success": False, "message": ADD_FAILED}

        item, product = added["item"], added["product"]
        if item.quantity > quantity:
            message = f'Количество "{product.name}" обновлено до {item.quantity} шт.'
        else:
            message = f'"{product.name}" добавлен в корзину ({quantity} шт.)'

        return {
            "success": True,
            "message": message,
            "product": product.name,
            "quantity": item.quantity,
        }

    def get_cart_info(self) -> Dict[str, Any]:
        try:
            lines = self.carts.get_lines(self.user_id)
        except SQLAlchemyError as e:
            logger.error(f"Error getting cart info: {e}", exc_info=True)
            return {
                "items": [],
                "totalItems": 0,
                "totalAmount": "0.00",
                "message": "Ошибка при получении информации о корзине",
            }

        items = []
        total_items = 0
        total_amount = Decimal("0.00")
        for item, product in lines:
            total_items += item.quantity
            if product is not None:
                total_amount += Decimal(product.price) * item.quantity
            items.append(
                {
                    "name": product.name if product is not None else "Неизвестный товар",
                    "quantity": item.quantity,
                    "price": format(product.price, ".2f") if product is not None else "0",
                }
            )

        amount = format(total_amount, ".2f")
        return {
            "items": items,
            "totalItems": total_items,
            "totalAmount": amount,
            "message": (
                f"В корзине {total_items} товар(ов) на сумму ${amount}"
                if total_items > 0
                else "Корзина пуста"
            ),
        }
