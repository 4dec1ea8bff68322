# storefront/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for everything on the wire: camelCase JSON, snake_case in python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ---------------------------------------------------------------- catalog

class ProductFilters(ApiModel):
    """Validated GET /products query."""

    category: Optional[UUID] = None
    search: Optional[str] = Field(None, max_length=200)
    min_price: Optional[Decimal] = Field(None, ge=0)
    max_price: Optional[Decimal] = Field(None, ge=0)
    featured: Optional[bool] = None
    sort_by: Literal["name", "price", "created", "featured"] = "created"
    sort_order: Literal["asc", "desc"] = "desc"
    limit: int = Field(20, ge=1, le=100)
    offset: int = Field(0, ge=0)


class CategorySummary(ApiModel):
    id: UUID
    name: str
    slug: str
    description: Optional[str] = None


class CategoryOut(CategorySummary):
    parent_id: Optional[UUID] = None
    image_url: Optional[str] = None
    is_active: bool


class ProductOut(ApiModel):
    id: UUID
    name: str
    slug: str
    description: Optional[str] = None
    short_description: Optional[str] = None
    sku: Optional[str] = None
    price: Decimal
    compare_price: Optional[Decimal] = None
    category_id: UUID
    inventory: int
    weight: Optional[Decimal] = None
    dimensions: Optional[Dict[str, Any]] = None
    images: List[str] = []
    tags: List[str] = []
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    is_active: bool
    is_featured: bool
    created_at: datetime
    updated_at: datetime


class ProductDetailOut(ProductOut):
    category: Optional[CategorySummary] = None


class ProductPage(ApiModel):
    data: List[ProductOut]
    total: int
    limit: int
    offset: int
    has_more: bool


# ---------------------------------------------------------------- cart

class AddToCartIn(ApiModel):
    product_id: UUID
    quantity: int = Field(..., gt=0, description="Quantity to add (> 0)")


class UpdateCartItemIn(ApiModel):
    quantity: int = Field(..., ge=0, description="New quantity, 0 removes the item")


class CartProductOut(ApiModel):
    id: UUID
    name: str
    price: Decimal
    compare_price: Optional[Decimal] = None
    images: List[str] = []
    inventory: int
    is_active: bool


class CartLineOut(ApiModel):
    id: UUID
    quantity: int
    created_at: datetime
    product: CartProductOut


class CartOut(ApiModel):
    items: List[CartLineOut]
    total_items: int
    total_amount: str


class CartItemOut(ApiModel):
    id: UUID
    user_id: str
    product_id: UUID
    quantity: int
    created_at: datetime
    updated_at: datetime


class CartMutationOut(ApiModel):
    message: str
    item: Optional[CartItemOut] = None
    product: Optional[ProductOut] = None
    deleted: bool = False


class CartRemovalOut(ApiModel):
    message: str
    deleted_item: CartItemOut


class CartClearOut(ApiModel):
    message: str
    deleted_count: int


# ---------------------------------------------------------------- assistant

class ChatRequest(ApiModel):
    message: str = Field(..., min_length=1, max_length=1000)
    conversation_id: Optional[str] = None


class ProductBrief(ApiModel):
    """What the assistant sees of a product."""

    id: UUID
    name: str
    description: Optional[str] = None
    short_description: Optional[str] = None
    price: Decimal
    compare_price: Optional[Decimal] = None
    inventory: int
    images: List[str] = []
    tags: List[str] = []


class FunctionResult(ApiModel):
    function: str
    args: Dict[str, Any] = {}
    result: Dict[str, Any]


class ChatResponse(ApiModel):
    message: str
    function_results: List[FunctionResult]
    timestamp: datetime
    model: str
    usage: Optional[Dict[str, Any]] = None


# ---------------------------------------------------------------- users

class UserUpsert(ApiModel):
    id: str = Field(..., min_length=1, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)


class UserRead(ApiModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    created_at: datetime


# ---------------------------------------------------------------- misc

class HealthOut(ApiModel):
    status: str
    timestamp: datetime
    database: str


class MessageOut(ApiModel):
    message: str
