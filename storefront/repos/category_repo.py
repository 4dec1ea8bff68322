# storefront/repos/category_repo.py
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.category import CategoryModel


class CategoryRepo:
    def __init__(self, db: Session):
        self.db = db

    def list_active(self) -> Sequence[CategoryModel]:
        stmt = select(CategoryModel).where(CategoryModel.is_active.is_(True)).order_by(CategoryModel.name)
        return self.db.execute(stmt).scalars().all()
