import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.core.security import create_access_token, hash_password
from app.db.base import Base, enable_sqlite_foreign_keys, get_db
from app.db.models.hoarding import Hoarding
from app.db.models.user import User
from app.services.storage import StoredObject, get_storage

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeStorage:
    """In-memory stand-in for the S3 bucket."""

    def __init__(self):
        self.objects = {}

    def upload(self, fileobj, key, content_type):
        self.objects[key] = (fileobj.read(), content_type)
        return StoredObject(url=f"https://cdn.hoardings.test/{key}", key=key)

    def delete(self, key):
        self.objects.pop(key, None)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def client(db, storage):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make(role="buyer", email=None, password="secret123"):
        user = User(
            email=email or f"{role}{db.query(User).count() + 1}@hoardings.io",
            first_name="Asha",
            last_name="Rao",
            phone_number="+919800000000",
            password_hash=hash_password(password),
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def buyer(make_user):
    return make_user("buyer")


@pytest.fixture
def vendor(make_user):
    return make_user("vendor")


@pytest.fixture
def admin(make_user):
    return make_user("admin")


@pytest.fixture
def make_hoarding(db, vendor):
    def _make(base_price=1000.0, per="day", additional_costs=None, status="approved", owner=None, city="Pune"):
        hoarding = Hoarding(
            vendor_id=(owner or vendor).id,
            name="MG Road Gantry",
            description="Lit gantry facing inbound traffic",
            media_type="Gantry",
            address="MG Road",
            area="Camp",
            city=city,
            state="Maharashtra",
            width=40,
            height=20,
            units="ft",
            aspect_ratio="2:1",
            media=[],
            base_price=base_price,
            price_per=per,
            additional_costs=additional_costs or [],
            status=status,
        )
        db.add(hoarding)
        db.commit()
        db.refresh(hoarding)
        return hoarding

    return _make


@pytest.fixture
def hoarding(make_hoarding):
    return make_hoarding()


def future(days):
    return date.today() + timedelta(days=days)
