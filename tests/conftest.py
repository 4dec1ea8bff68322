# tests/conftest.py
"""
Every test gets a fresh in-memory SQLite database with a small catalog.
The app's get_db dependency is overridden to hand out the same session.
"""
import os

# before anything from storefront is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ASSISTANT_MODE", "keyword")
os.environ["ENVIRONMENT"] = "development"

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.api import create_app
from storefront.api.routers.assistant import get_intent_resolver
from storefront.data.database import Base, get_db
from storefront.data.models import CategoryModel, ProductModel
from storefront.services.intent_resolvers import KeywordIntentResolver

logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

USER = "user_2abc"
OTHER_USER = "user_9xyz"


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def catalog(db):
    """
    Products keyed by name. SQLite only folds ASCII case, so the Cyrillic
    names carry the lowercase fragments the assistant searches for.
    """
    dairy = CategoryModel(name="Молочные продукты", slug="dairy-products", is_active=True)
    bakery = CategoryModel(name="Хлеб и выпечка", slug="bread-bakery", is_active=True)
    fruit = CategoryModel(name="Фрукты и овощи", slug="fruits-vegetables", is_active=True)
    db.add_all([dairy, bakery, fruit])
    db.flush()

    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    rows = [
        ("Milk 3.2% 1L", "milk-1l", "1.89", 40, dairy, False, True, "Whole milk"),
        ("Фермерское молоко 2.5%", "farm-milk", "2.50", 10, dairy, True, True, "Свежее молоко"),
        ("Ржаной хлеб", "rye-bread", "2.20", 5, bakery, False, True, "Традиционный"),
        ("Сочные яблоки", "apples", "3.50", 100, fruit, True, True, "Яблоки Гала"),
        ("Gouda Cheese", "gouda", "12.90", 25, dairy, True, True, "Dutch cheese"),
        ("Old Cheese", "old-cheese", "5.00", 10, dairy, False, False, "Discontinued"),
    ]
    products = {}
    for i, (name, slug, price, inventory, category, featured, active, short) in enumerate(rows):
        product = ProductModel(
            name=name,
            slug=slug,
            short_description=short,
            price=Decimal(price),
            inventory=inventory,
            category_id=category.id,
            is_featured=featured,
            is_active=active,
            created_at=base + timedelta(days=i),
            updated_at=base + timedelta(days=i),
        )
        db.add(product)
        products[name] = product

    db.commit()
    for product in products.values():
        db.refresh(product)
    return products


@pytest.fixture()
def app(db):
    app = create_app()

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_intent_resolver] = KeywordIntentResolver
    yield app
    app.dependency_overrides.clear()


@pytest.fixture()
def client(app):
    # no context manager: the lifespan would try to reach the configured database
    return TestClient(app)
