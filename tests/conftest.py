"""
Shared pytest fixtures: in-memory database, application, and users per role.
"""
from decimal import Decimal
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from pricecheck.config import Settings
from pricecheck.database import Base, get_db
from pricecheck.main import create_app
from pricecheck.models import Inventory, Product, ProductCategory, Role, Supermarket, User
from pricecheck.services.auth import Identity, create_access_token, hash_password

TEST_PASSWORD = "correct-horse-battery"


@pytest.fixture(scope="session")
def password_hash() -> str:
    """Hash once; argon2 is deliberately slow."""
    return hash_password(TEST_PASSWORD)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite://",
        jwt_secret_key="test-secret",
        redis_url="redis://localhost:1",
        shopping_list_timeout_seconds=10.0,
    )


@pytest.fixture
def app(settings):
    app = create_app(settings)
    Base.metadata.create_all(bind=app.state.engine)
    yield app
    Base.metadata.drop_all(bind=app.state.engine)
    app.state.engine.dispose()


@pytest.fixture
def test_db(app) -> Generator[Session, None, None]:
    """Session shared by the test body and every request it makes."""
    session = app.state.session_factory()

    def _get_db():
        yield session

    app.dependency_overrides[get_db] = _get_db
    try:
        yield session
    finally:
        app.dependency_overrides.pop(get_db, None)
        session.close()


@pytest.fixture
def client(app, test_db) -> TestClient:
    return TestClient(app)


@pytest.fixture
def make_user(test_db, password_hash):
    def _make_user(email: str, role: Role = Role.BASIC) -> User:
        user = User(email=email, hashed_password=password_hash, role=role)
        test_db.add(user)
        test_db.commit()
        test_db.refresh(user)
        return user
    return _make_user


@pytest.fixture
def basic_user(make_user) -> User:
    return make_user("basic@example.com", Role.BASIC)


@pytest.fixture
def verified_user(make_user) -> User:
    return make_user("verified@example.com", Role.VERIFIED)


@pytest.fixture
def admin_user(make_user) -> User:
    return make_user("admin@example.com", Role.ADMIN)


def identity_of(user: User) -> Identity:
    return Identity(user_id=user.id, email=user.email, role=user.role)


def _headers(user: User, settings: Settings) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user, settings)}"}


@pytest.fixture
def basic_headers(basic_user, settings) -> dict:
    return _headers(basic_user, settings)


@pytest.fixture
def verified_headers(verified_user, settings) -> dict:
    return _headers(verified_user, settings)


@pytest.fixture
def admin_headers(admin_user, settings) -> dict:
    return _headers(admin_user, settings)


@pytest.fixture
def market(test_db, admin_user):
    """
    Two New York supermarkets and one in Boston with a handful of prices.

    Milk is cheapest at Green Grocer (1.89), Bread only at Fresh Mart,
    Apples are out of stock everywhere in New York, Cheese is sold only in
    Boston.
    """
    fresh_mart = Supermarket(name="Fresh Mart", city="New York", created_by_id=admin_user.id)
    green_grocer = Supermarket(name="Green Grocer", city="New York", created_by_id=admin_user.id)
    corner_shop = Supermarket(name="Corner Shop", city="Boston", created_by_id=admin_user.id)
    milk = Product(name="Milk", category=ProductCategory.DAIRY, created_by_id=admin_user.id)
    bread = Product(name="Bread", category=ProductCategory.BAKERY, created_by_id=admin_user.id)
    apples = Product(name="Apples", category=ProductCategory.FRUITS, created_by_id=admin_user.id)
    cheese = Product(name="Cheese", category=ProductCategory.DAIRY, created_by_id=admin_user.id)
    test_db.add_all([fresh_mart, green_grocer, corner_shop, milk, bread, apples, cheese])
    test_db.flush()

    test_db.add_all([
        Inventory(supermarket_id=fresh_mart.id, product_id=milk.id, price=Decimal("2.10"), in_stock=True),
        Inventory(supermarket_id=green_grocer.id, product_id=milk.id, price=Decimal("1.89"), in_stock=True),
        Inventory(supermarket_id=corner_shop.id, product_id=milk.id, price=Decimal("0.99"), in_stock=True),
        Inventory(supermarket_id=fresh_mart.id, product_id=bread.id, price=Decimal("3.50"), in_stock=True),
        Inventory(supermarket_id=fresh_mart.id, product_id=apples.id, price=Decimal("0.50"), in_stock=False),
        Inventory(supermarket_id=green_grocer.id, product_id=apples.id, price=Decimal("0.75"), in_stock=False),
        Inventory(supermarket_id=corner_shop.id, product_id=cheese.id, price=Decimal("6.25"), in_stock=True),
    ])
    test_db.commit()

    return {
        "fresh_mart": fresh_mart,
        "green_grocer": green_grocer,
        "corner_shop": corner_shop,
        "milk": milk,
        "bread": bread,
        "apples": apples,
        "cheese": cheese,
    }


@pytest.fixture
def identity_for():
    return identity_of
