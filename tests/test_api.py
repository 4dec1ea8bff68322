# tests/test_api.py
import uuid
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from storefront.api.routers.assistant import get_intent_resolver
from storefront.data.database import get_db
from tests.conftest import OTHER_USER, USER

API = "/api/v1"


# ---------------------------------------------------------------- health

def test_health_on_both_paths(client):
    for path in ("/health", f"{API}/health"):
        response = client.get(path)
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["database"] == "connected"
        assert "timestamp" in body


def test_health_reports_unreachable_database(app, client):
    broken = MagicMock()
    broken.execute.side_effect = OperationalError("SELECT 1", {}, Exception("db down"))

    def override():
        yield broken

    app.dependency_overrides[get_db] = override
    body = client.get("/health").json()

    assert body["status"] == "degraded"
    assert body["database"] == "disconnected"


# ---------------------------------------------------------------- catalog

def test_list_products_camel_case_page(client, catalog):
    response = client.get(f"{API}/products", params={"limit": 2})

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 5
    assert body["limit"] == 2
    assert body["offset"] == 0
    assert body["hasMore"] is True
    first = body["data"][0]
    assert {"isActive", "isFeatured", "categoryId", "shortDescription"} <= set(first)


def test_list_products_filters(client, catalog):
    response = client.get(
        f"{API}/products",
        params={"minPrice": "2", "maxPrice": "3", "sortBy": "price", "sortOrder": "asc"},
    )

    body = response.json()
    assert [p["price"] for p in body["data"]] == ["2.20", "2.50"]


def test_list_products_featured_flag(client, catalog):
    body = client.get(f"{API}/products", params={"featured": "true"}).json()

    assert body["total"] == 3
    assert all(p["isFeatured"] for p in body["data"])


def test_invalid_query_is_400_envelope(client, catalog):
    response = client.get(f"{API}/products", params={"limit": 500})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Bad Request"
    assert body["message"] == "Invalid request"
    assert body["details"][0]["field"] == "limit"


def test_invalid_category_id_is_400(client, catalog):
    response = client.get(f"{API}/products", params={"category": "dairy"})

    assert response.status_code == 400


def test_get_product_with_category(client, catalog):
    milk = catalog["Milk 3.2% 1L"]

    response = client.get(f"{API}/products/{milk.id}")

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Milk 3.2% 1L"
    assert body["price"] == "1.89"
    assert body["category"]["slug"] == "dairy-products"


def test_get_missing_product_is_404(client, catalog):
    response = client.get(f"{API}/products/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json() == {"error": "Not Found", "message": "Product not found"}


def test_malformed_product_id_is_400(client, catalog):
    response = client.get(f"{API}/products/not-a-uuid")

    assert response.status_code == 400


def test_categories(client, catalog):
    response = client.get(f"{API}/categories")

    assert response.status_code == 200
    assert len(response.json()) == 3


# ---------------------------------------------------------------- cart

def test_cart_flow(client, catalog):
    milk = catalog["Milk 3.2% 1L"]

    added = client.post(f"{API}/cart/{USER}", json={"productId": str(milk.id), "quantity": 3})
    assert added.status_code == 200
    assert added.json()["message"] == "Product added to cart successfully"
    item_id = added.json()["item"]["id"]

    again = client.post(f"{API}/cart/{USER}", json={"productId": str(milk.id), "quantity": 5})
    assert again.json()["message"] == "Cart updated successfully"
    assert again.json()["item"]["quantity"] == 8

    cart = client.get(f"{API}/cart/{USER}").json()
    assert cart["totalItems"] == 8
    assert cart["totalAmount"] == "15.12"
    assert cart["items"][0]["product"]["name"] == "Milk 3.2% 1L"

    updated = client.put(f"{API}/cart/{USER}/items/{item_id}", json={"quantity": 2})
    assert updated.status_code == 200
    assert updated.json()["item"]["quantity"] == 2

    removed = client.delete(f"{API}/cart/{USER}/items/{item_id}")
    assert removed.status_code == 200
    assert removed.json()["deletedItem"]["id"] == item_id

    assert client.get(f"{API}/cart/{USER}").json()["items"] == []


def test_add_over_stock_is_409(client, catalog):
    milk = catalog["Milk 3.2% 1L"]

    response = client.post(f"{API}/cart/{USER}", json={"productId": str(milk.id), "quantity": 999})

    assert response.status_code == 409
    assert response.json()["message"] == "Insufficient stock. Available: 40"
    assert client.get(f"{API}/cart/{USER}").json()["totalItems"] == 0


def test_add_inactive_product_is_404(client, catalog):
    response = client.post(
        f"{API}/cart/{USER}",
        json={"productId": str(catalog["Old Cheese"].id), "quantity": 1},
    )

    assert response.status_code == 404


def test_add_with_bad_body_is_400(client, catalog):
    milk = catalog["Milk 3.2% 1L"]

    assert client.post(f"{API}/cart/{USER}", json={"productId": str(milk.id), "quantity": 0}).status_code == 400
    assert client.post(f"{API}/cart/{USER}", json={"quantity": 1}).status_code == 400


def test_update_to_zero_deletes(client, catalog):
    milk = catalog["Milk 3.2% 1L"]
    item_id = client.post(f"{API}/cart/{USER}", json={"productId": str(milk.id), "quantity": 1}).json()["item"]["id"]

    response = client.put(f"{API}/cart/{USER}/items/{item_id}", json={"quantity": 0})

    assert response.status_code == 200
    assert response.json()["deleted"] is True
    assert client.get(f"{API}/cart/{USER}").json()["items"] == []


def test_foreign_item_is_404(client, catalog):
    milk = catalog["Milk 3.2% 1L"]
    item_id = client.post(f"{API}/cart/{USER}", json={"productId": str(milk.id), "quantity": 1}).json()["item"]["id"]

    assert client.put(f"{API}/cart/{OTHER_USER}/items/{item_id}", json={"quantity": 3}).status_code == 404
    assert client.delete(f"{API}/cart/{OTHER_USER}/items/{item_id}").status_code == 404


def test_clear_cart(client, catalog):
    for name in ("Milk 3.2% 1L", "Gouda Cheese"):
        client.post(f"{API}/cart/{USER}", json={"productId": str(catalog[name].id), "quantity": 1})

    response = client.delete(f"{API}/cart/{USER}")

    assert response.json() == {"message": "Cart cleared successfully", "deletedCount": 2}
    assert client.get(f"{API}/cart/{USER}").json()["totalItems"] == 0


# ---------------------------------------------------------------- assistant

def test_chat_with_keyword_assistant(client, catalog):
    response = client.post(f"{API}/ai/chat/{USER}", json={"message": "Хочу купить бананы"})

    assert response.status_code == 200
    body = response.json()
    assert body["model"] == "keyword-assistant"
    assert body["functionResults"][0]["function"] == "search_and_add_to_cart"
    # no bananas in the test catalog
    assert body["message"].startswith("❌ Товар")


def test_chat_rejects_empty_message(client, catalog):
    response = client.post(f"{API}/ai/chat/{USER}", json={"message": ""})

    assert response.status_code == 400


def test_chat_without_api_key_is_503(app, client, catalog, monkeypatch):
    monkeypatch.setattr("storefront.services.intent_resolvers.ASSISTANT_MODE", "openai")
    monkeypatch.setattr("storefront.services.intent_resolvers.OPENAI_API_KEY", None)
    del app.dependency_overrides[get_intent_resolver]

    response = client.post(f"{API}/ai/chat/{USER}", json={"message": "Привет"})

    assert response.status_code == 503
    assert response.json()["message"] == "AI assistant temporarily unavailable"


# ---------------------------------------------------------------- users & orders

def test_user_upsert_and_read(client):
    created = client.post(f"{API}/users", json={"id": USER, "email": "anna@example.com", "firstName": "Anna"})
    assert created.status_code == 200

    client.post(f"{API}/users", json={"id": USER, "lastName": "Petrova"})

    body = client.get(f"{API}/users/{USER}").json()
    assert body["email"] == "anna@example.com"
    assert body["firstName"] == "Anna"
    assert body["lastName"] == "Petrova"


def test_unknown_user_is_404(client):
    assert client.get(f"{API}/users/nobody").status_code == 404


def test_orders_are_stubs(client):
    assert client.get(f"{API}/orders").json() == {"message": "Orders endpoint - coming soon"}
    assert client.post(f"{API}/orders").json() == {"message": "Create order endpoint - coming soon"}


def test_update_over_stock_is_409_and_keeps_quantity(client, catalog):
    bread = catalog["Ржаной хлеб"]
    item_id = client.post(f"{API}/cart/{USER}", json={"productId": str(bread.id), "quantity": 2}).json()["item"]["id"]

    response = client.put(f"{API}/cart/{USER}/items/{item_id}", json={"quantity": 6})

    assert response.status_code == 409
    assert response.json()["message"] == "Insufficient stock. Available: 5"
    assert client.get(f"{API}/cart/{USER}").json()["items"][0]["quantity"] == 2


def test_unknown_item_is_404(client, catalog):
    missing = uuid.uuid4()

    assert client.put(f"{API}/cart/{USER}/items/{missing}", json={"quantity": 1}).status_code == 404
    assert client.delete(f"{API}/cart/{USER}/items/{missing}").status_code == 404
