import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from food_ordering.core.database import Base, get_db
from food_ordering.deps import get_current_user
from food_ordering.models.category import Category
from food_ordering.models.menu_item import MenuItem
from food_ordering.models.user import User
from tests.fixtures_data import CATEGORIES, CUSTOMER, MENU_ITEMS, OTHER_CUSTOMER


def _build_session():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    return testing_session_local()


@pytest.fixture
def db():
    session = _build_session()

    for data in (CUSTOMER, OTHER_CUSTOMER):
        session.add(
            User(
                id=data["id"],
                email=data["email"],
                full_name=data["full_name"],
                phone=data["phone"],
                password_hash="not-a-real-hash",
            )
        )
    for data in CATEGORIES:
        session.add(Category(**data))
    for data in MENU_ITEMS:
        session.add(MenuItem(**data))
    session.commit()

    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def customer(db):
    return db.query(User).filter(User.id == CUSTOMER["id"]).first()


@pytest.fixture
def api_app(db, monkeypatch):
    from food_ordering import main

    monkeypatch.setattr(main, "_startup_tasks", lambda: None)
    main.app.dependency_overrides[get_db] = lambda: db
    try:
        yield main.app
    finally:
        main.app.dependency_overrides.clear()


@pytest.fixture
def client(api_app):
    return TestClient(api_app)


@pytest.fixture
def customer_client(api_app, customer):
    api_app.dependency_overrides[get_current_user] = lambda: customer
    return TestClient(api_app)

