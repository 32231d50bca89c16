import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"
os.environ["COOKIE_SECURE"] = "false"

import itertools
from decimal import Decimal

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.data.cache import get_redis
from app.data.database import Base, get_db
from app.data.models import CategoryModel, ProductModel, ShippingOptionModel
from app.main import create_app
from app.repos.cart_repo import CartRepo

_slugs = itertools.count(1)


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def redis_client():
    return fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture()
def cart_repo(redis_client):
    return CartRepo(redis_client)


@pytest.fixture()
def client(session_factory, redis_client):
    app = create_app()

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_redis] = lambda: redis_client
    return TestClient(app)


@pytest.fixture()
def admin_client(client):
    client.cookies.set("admin-session", "authenticated")
    return client


@pytest.fixture()
def make_product(db):
    def _make(name="Keyboard", price="10.00", stock=5, **kwargs):
        product = ProductModel(
            slug=kwargs.pop("slug", f"{name.lower().replace(' ', '-')}-{next(_slugs)}"),
            name=name,
            price=Decimal(price),
            stock=stock,
            images=kwargs.pop("images", []),
            **kwargs,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture()
def make_category(db):
    def _make(name="Keyboards", slug=None):
        category = CategoryModel(name=name, slug=slug or f"{name.lower()}-{next(_slugs)}")
        db.add(category)
        db.commit()
        db.refresh(category)
        return category

    return _make


@pytest.fixture()
def make_shipping_option(db):
    def _make(name="Standard", price="9.90", delivery_days=5):
        option = ShippingOptionModel(name=name, price=Decimal(price), delivery_days=delivery_days)
        db.add(option)
        db.commit()
        db.refresh(option)
        return option

    return _make
