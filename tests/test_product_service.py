# tests/test_product_service.py
import uuid
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError

from storefront.domain.schemas import ProductFilters
from storefront.services.product_service import ProductService
from storefront.utils.errors import NotFoundError, ServiceError


def names(page):
    return [p.name for p in page["data"]]


def test_list_products_hides_inactive(db, catalog):
    page = ProductService(db).list_products(ProductFilters())

    assert "Old Cheese" not in names(page)
    assert page["total"] == 5
    assert all(p.is_active for p in page["data"])


def test_default_sort_is_newest_first(db, catalog):
    page = ProductService(db).list_products(ProductFilters())

    assert names(page)[0] == "Gouda Cheese"
    assert names(page)[-1] == "Milk 3.2% 1L"


def test_price_bounds_are_inclusive(db, catalog):
    filters = ProductFilters(min_price=Decimal("2.20"), max_price=Decimal("3.50"))
    page = ProductService(db).list_products(filters)

    assert sorted(names(page)) == sorted(["Фермерское молоко 2.5%", "Ржаной хлеб", "Сочные яблоки"])
    assert all(Decimal("2.20") <= p.price <= Decimal("3.50") for p in page["data"])


def test_filter_by_category_and_featured(db, catalog):
    dairy_id = catalog["Milk 3.2% 1L"].category_id

    page = ProductService(db).list_products(ProductFilters(category=dairy_id, featured=True))

    assert sorted(names(page)) == ["Gouda Cheese", "Фермерское молоко 2.5%"]


def test_search_is_case_insensitive_substring(db, catalog):
    page = ProductService(db).list_products(ProductFilters(search="milk"))

    assert names(page) == ["Milk 3.2% 1L"]


def test_sort_by_price_ascending(db, catalog):
    page = ProductService(db).list_products(ProductFilters(sort_by="price", sort_order="asc"))

    prices = [p.price for p in page["data"]]
    assert prices == sorted(prices)


def test_pagination_reports_has_more(db, catalog):
    svc = ProductService(db)

    first = svc.list_products(ProductFilters(limit=2, offset=0))
    last = svc.list_products(ProductFilters(limit=2, offset=4))

    assert len(first["data"]) == 2
    assert first["has_more"] is True
    assert len(last["data"]) == 1
    assert last["has_more"] is False
    assert first["total"] == last["total"] == 5


@pytest.mark.parametrize(
    "bad",
    [{"limit": 0}, {"limit": 101}, {"offset": -1}, {"min_price": -1}, {"sort_by": "rating"}],
)
def test_filters_reject_out_of_range_values(bad):
    with pytest.raises(ValidationError):
        ProductFilters(**bad)


def test_get_product_includes_category(db, catalog):
    milk = catalog["Milk 3.2% 1L"]

    product = ProductService(db).get_product(milk.id)

    assert product["name"] == "Milk 3.2% 1L"
    assert product["category"]["slug"] == "dairy-products"


def test_get_inactive_product_is_not_found(db, catalog):
    with pytest.raises(NotFoundError):
        ProductService(db).get_product(catalog["Old Cheese"].id)


def test_get_unknown_product_is_not_found(db, catalog):
    with pytest.raises(NotFoundError):
        ProductService(db).get_product(uuid.uuid4())


def test_storage_failure_is_not_reported_as_not_found(db):
    svc = ProductService(db)
    svc.repo = MagicMock()
    svc.repo.get_active_with_category.side_effect = OperationalError("SELECT 1", {}, Exception("db down"))

    with pytest.raises(ServiceError, match="Failed to get product"):
        svc.get_product(uuid.uuid4())


def test_list_categories_sorted_by_name(db, catalog):
    categories = ProductService(db).list_categories()

    assert [c.slug for c in categories] == ["dairy-products", "fruits-vegetables", "bread-bakery"]
