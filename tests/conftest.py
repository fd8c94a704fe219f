"""Shared fixtures: in-memory database, fake media host and an API client."""

import base64
import os
import threading
import time

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DB_LOG_SLOW_QUERIES", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.auth import get_current_user
from storefront.database import Base, get_db
from storefront.main import app
from storefront.models import Product, User
from storefront.utils.media_storage import MediaStorageError, StoredImage, get_media_storage


def make_data_uri(content: bytes, mime_type: str = "image/png") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(content).decode()}"


class FakeMediaStorage:
    """Thread-safe stand-in for the R2 media host.

    Records upload/delete calls in order, tracks the highest number of
    uploads running at once, and can be told to fail on given content.
    """

    def __init__(self, delay: float = 0.0, fail_on: bytes = None, fail_delete_on: str = None):
        self.delay = delay
        self.fail_on = fail_on
        self.fail_delete_on = fail_delete_on
        self.uploaded = []
        self.deleted = []
        self.events = []
        self.max_in_flight = 0
        self._in_flight = 0
        self._lock = threading.Lock()

    def upload(self, content: bytes, content_type: str, folder: str) -> StoredImage:
        with self._lock:
            self._in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self._in_flight)
        try:
            # Later images in a chunk finish first to expose ordering bugs
            if self.delay:
                time.sleep(self.delay / (1 + len(content) % 3))
            if self.fail_on is not None and content == self.fail_on:
                raise MediaStorageError("Upload failed: simulated outage")
            key = f"{folder}/{content.decode()}"
            with self._lock:
                self.uploaded.append(key)
                self.events.append(("upload", key))
            return StoredImage(remote_id=key, url=f"https://cdn.test/{key}")
        finally:
            with self._lock:
                self._in_flight -= 1

    def delete(self, remote_id: str) -> None:
        if remote_id == self.fail_delete_on:
            raise MediaStorageError("Delete failed: simulated outage")
        with self._lock:
            self.deleted.append(remote_id)
            self.events.append(("delete", remote_id))


@pytest.fixture
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


@pytest.fixture
def db_session(engine):
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = Session()
    yield session
    session.close()


@pytest.fixture
def admin_user(db_session):
    user = User(
        firebase_uid="admin-uid",
        email="admin@example.com",
        full_name="Ada Admin",
        avatar_url="https://cdn.test/avatars/ada.png",
        role="admin",
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def customer(db_session):
    user = User(
        firebase_uid="customer-uid",
        email="bob@example.com",
        full_name="Bob Buyer",
        avatar_url="https://cdn.test/avatars/bob.png",
        role="user",
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def other_customer(db_session):
    user = User(
        firebase_uid="carol-uid",
        email="carol@example.com",
        full_name=None,
        avatar_url=None,
        role="user",
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def media_storage():
    return FakeMediaStorage()


@pytest.fixture
def product_factory(db_session, admin_user):
    """Insert products straight into the database"""

    def create(**overrides):
        fields = {
            "name": "Trail Runner",
            "description": "Lightweight trail running shoe",
            "price": 120.0,
            "info": "Rubber sole",
            "category": "Running",
            "stock": {"40": 3, "42": 1},
            "images": [],
            "ratings": 0,
            "num_of_reviews": 0,
            "user_id": admin_user.id,
        }
        fields.update(overrides)
        product = Product(**fields)
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product

    return create


class AuthAs:
    """Switches the user returned by get_current_user during a test"""

    def __init__(self, user=None):
        self.user = user

    def __call__(self, user):
        self.user = user


@pytest.fixture
def auth_as(admin_user):
    return AuthAs(admin_user)


@pytest.fixture
def client(db_session, media_storage, auth_as):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_media_storage] = lambda: media_storage
    app.dependency_overrides[get_current_user] = lambda: auth_as.user

    yield TestClient(app)

    app.dependency_overrides.clear()
