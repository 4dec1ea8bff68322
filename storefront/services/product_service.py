# storefront/services/product_service.py
from typing import Any, Dict
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.domain.schemas import ProductFilters
from storefront.repos.category_repo import CategoryRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.errors import NotFoundError, ServiceError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ProductService:
    """
    Read side of the catalog.
    Only active products are ever returned; filters are validated before they get here.
    """

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)
        self.categories = CategoryRepo(db)

    def list_products(self, filters: ProductFilters) -> Dict[str, Any]:
        logger.info(
            f"Listing products: search={filters.search!r} category={filters.category} "
            f"price=[{filters.min_price}, {filters.max_price}] featured={filters.featured} "
            f"sort={filters.sort_by}/{filters.sort_order} limit={filters.limit} offset={filters.offset}"
        )
        try:
            rows = self.repo.list_products(filters)
            total = self.repo.count_products(filters)
        except SQLAlchemyError as e:
            logger.error(f"Error getting products: {e}", exc_info=True)
            raise ServiceError("Failed to get products") from e

        return {
            "data": rows,
            "total": total,
            "limit": filters.limit,
            "offset": filters.offset,
            "has_more": filters.offset + filters.limit < total,
        }

    def get_product(self, product_id: UUID) -> Dict[str, Any]:
        try:
            row = self.repo.get_active_with_category(product_id)
        except SQLAlchemyError as e:
            logger.error(f"Error getting product {product_id}: {e}", exc_info=True)
            raise ServiceError("Failed to get product") from e

        if row is None:
            logger.warning(f"Product {product_id} not found or inactive")
            raise NotFoundError("Product not found")

        product, category = row
        return {
            "id": product.id,
            "name": product.name,
            "slug": product.slug,
            "description": product.description,
            "short_description": product.short_description,
            "sku": product.sku,
            "price": product.price,
            "compare_price": product.compare_price,
            "category_id": product.category_id,
            "inventory": product.inventory,
            "weight": product.weight,
            "dimensions": product.dimensions,
            "images": product.images or [],
            "tags": product.tags or [],
            "meta_title": product.meta_title,
            "meta_description": product.meta_description,
            "is_active": product.is_active,
            "is_featured": product.is_featured,
            "created_at": product.created_at,
            "updated_at": product.updated_at,
            "category": (
                {
                    "id": category.id,
                    "name": category.name,
                    "slug": category.slug,
                    "description": category.description,
                }
                if category is not None
                else None
            ),
        }

    def list_categories(self):
        try:
            return self.categories.list_active()
        except SQLAlchemyError as e:
            logger.error(f"Error getting categories: {e}", exc_info=True)
            raise ServiceError("Failed to get categories") from e
