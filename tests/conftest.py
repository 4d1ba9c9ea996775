from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import backend.fastapi.models  # noqa: F401
from backend.fastapi.dependencies.database import Base, get_sync_db
from backend.fastapi.main import app
from backend.fastapi.models import Branch, ServiceItem, User, UserRole, Washer
from backend.security.auth import create_user_token
from backend.security.password import hash_password

PASSWORD = "secret123"


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
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_sync_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_sync_db] = override_get_sync_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _add(db, *objects):
    db.add_all(objects)
    db.commit()
    return objects


@pytest.fixture
def branch_a(db):
    branch, = _add(db, Branch(name="Branch A", code="A", location="Back Carwash Location"))
    return branch


@pytest.fixture
def branch_b(db):
    branch, = _add(db, Branch(name="Branch B", code="B"))
    return branch


@pytest.fixture
def washers(db, branch_a):
    """Sam, Idowu and Tunde working at branch A."""
    sam, idowu, tunde = _add(
        db,
        Washer(name="Sam", branch_id=branch_a.id),
        Washer(name="Idowu", branch_id=branch_a.id),
        Washer(name="Tunde", branch_id=branch_a.id),
    )
    return {"Sam": sam, "Idowu": idowu, "Tunde": tunde}


@pytest.fixture
def washers_b(db, branch_b):
    """Branch B has its own Sam and no designated washer."""
    sam, = _add(db, Washer(name="Sam", branch_id=branch_b.id))
    return {"Sam": sam}


@pytest.fixture
def service_items(db):
    items = _add(
        db,
        ServiceItem(name="Full Wash", price=Decimal("50.00")),
        ServiceItem(name="Engine Wash", price=Decimal("300.00")),
        ServiceItem(name="Radiator Flush", price=Decimal("150.00")),
        ServiceItem(name="Car Rug", price=Decimal("0.00")),
        ServiceItem(name="Interior Vacuum", price=Decimal("30.00")),
    )
    return {item.name: item for item in items}


def make_user(db, branch, email, role=UserRole.ADMIN):
    user, = _add(db, User(
        email=email,
        name=email.split("@")[0].title(),
        password_hash=hash_password(PASSWORD),
        role=role.value,
        branch_id=branch.id,
    ))
    return user


def auth_headers(user):
    token = create_user_token(str(user.id), user.email, str(user.branch_id), user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_user(db, branch_a):
    return make_user(db, branch_a, "manager@example.com")


@pytest.fixture
def super_admin(db, branch_a):
    return make_user(db, branch_a, "owner@example.com", role=UserRole.SUPER_ADMIN)


@pytest.fixture
def headers(admin_user):
    return auth_headers(admin_user)


@pytest.fixture
def super_headers(super_admin):
    return auth_headers(super_admin)


@pytest.fixture
def login_as(db):
    """Create a user in a branch and return their auth headers."""
    def _login_as(branch, email, role=UserRole.ADMIN):
        return auth_headers(make_user(db, branch, email, role=role))
    return _login_as
