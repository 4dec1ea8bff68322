import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.data.models.user import _utcnow


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    slug = Column(String(200), nullable=False, unique=True, index=True)
    description = Column(Text)
    short_description = Column(Text)
    sku = Column(String(100), unique=True, index=True)

    price = Column(Numeric(10, 2), nullable=False)
    compare_price = Column(Numeric(10, 2))

    category_id = Column(Uuid, ForeignKey("categories.id"), nullable=False, index=True)
    inventory = Column(Integer, nullable=False, default=0)
    weight = Column(Numeric(8, 3))
    dimensions = Column(JSON)  # {length, width, height}
    images = Column(JSON, nullable=False, default=list)
    tags = Column(JSON, nullable=False, default=list)

    meta_title = Column(String(200))
    meta_description = Column(Text)

    is_active = Column(Boolean, nullable=False, default=True, index=True)
    is_featured = Column(Boolean, nullable=False, default=False, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_product_price_non_negative"),
        CheckConstraint("inventory >= 0", name="ck_product_inventory_non_negative"),
    )

    category = relationship("CategoryModel", back_populates="products")
    cart_items = relationship("CartItemModel", back_populates="product", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', inventory={self.inventory})>"
