# storefront/repos/product_repo.py
from typing import Sequence
from uuid import UUID

from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import Session

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.domain.schemas import ProductFilters

_SORT_COLUMNS = {
    "name": ProductModel.name,
    "price": ProductModel.price,
    "featured": ProductModel.is_featured,
    "created": ProductModel.created_at,
}


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _conditions(filters: ProductFilters) -> list:
        conditions = [ProductModel.is_active.is_(True)]

        if filters.category:
            conditions.append(ProductModel.category_id == filters.category)
        if filters.search:
            conditions.append(ProductModel.name.ilike(f"%{filters.search}%"))
        if filters.min_price is not None:
            conditions.append(ProductModel.price >= filters.min_price)
        if filters.max_price is not None:
            conditions.append(ProductModel.price <= filters.max_price)
        if filters.featured is not None:
            conditions.append(ProductModel.is_featured.is_(filters.featured))

        return conditions

    def list_products(self, filters: ProductFilters) -> Sequence[ProductModel]:
        column = _SORT_COLUMNS.get(filters.sort_by, ProductModel.created_at)
        order_by = column.asc() if filters.sort_order == "asc" else column.desc()

        stmt = (
            select(ProductModel)
            .where(and_(*self._conditions(filters)))
            .order_by(order_by)
            .limit(filters.limit)
            .offset(filters.offset)
        )
        return self.db.execute(stmt).scalars().all()

    def count_products(self, filters: ProductFilters) -> int:
        stmt = select(func.count()).select_from(ProductModel).where(and_(*self._conditions(filters)))
        return int(self.db.execute(stmt).scalar_one())

    def get_active_with_category(self, product_id: UUID):
        """(product, category) row or None; category is None when the join misses."""
        stmt = (
            select(ProductModel, CategoryModel)
            .outerjoin(CategoryModel, ProductModel.category_id == CategoryModel.id)
            .where(ProductModel.id == product_id, ProductModel.is_active.is_(True))
            .limit(1)
        )
        return self.db.execute(stmt).first()

    def get_active(self, product_id: UUID) -> ProductModel | None:
        stmt = select(ProductModel).where(
            ProductModel.id == product_id,
            ProductModel.is_active.is_(True),
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def find_active_by_name(self, name: str) -> ProductModel | None:
        # first substring match, no ranking
        stmt = (
            select(ProductModel)
            .where(ProductModel.is_active.is_(True), ProductModel.name.ilike(f"%{name}%"))
            .limit(1)
        )
        return self.db.execute(stmt).scalars().first()

    def search(
        self,
        query: str | None = None,
        category: str | None = None,
        min_price=None,
        max_price=None,
        featured: bool | None = None,
        limit: int = 10,
    ) -> Sequence[ProductModel]:
        stmt = select(ProductModel).where(ProductModel.is_active.is_(True))

        if query:
            stmt = stmt.where(ProductModel.name.ilike(f"%{query}%"))
        if category:
            stmt = stmt.join(CategoryModel, ProductModel.category_id == CategoryModel.id).where(
                or_(
                    CategoryModel.name.ilike(f"%{category}%"),
                    CategoryModel.slug.ilike(f"%{category}%"),
                )
            )
        if min_price is not None:
            stmt = stmt.where(ProductModel.price >= min_price)
        if max_price is not None:
            stmt = stmt.where(ProductModel.price <= max_price)
        if featured is not None:
            stmt = stmt.where(ProductModel.is_featured.is_(featured))

        return self.db.execute(stmt.limit(limit)).scalars().all()
