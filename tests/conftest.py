"""Shared fixtures: in-memory database, seeded users and an HTTP client."""

import os

# Configure the app for tests before anything imports app.config
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("IDENTITY_PROVIDER", "jwt")
os.environ.setdefault("PAYMENT_GATEWAY", "manual")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.core.security import JWTIdentityVerifier, create_access_token, get_identity_verifier
from app.database import Base, get_db
from app.main import app as fastapi_app
from app.models.package import TourPackage
from app.models.user import User

TEST_SECRET = "test-secret-key"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # Let SQLAlchemy own BEGIN so SAVEPOINTs behave on pysqlite
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def users(session_factory) -> dict[str, User]:
    """One user per role, plus a second customer and a second guide."""
    created = {
        "customer": User(email="traveler@example.com", name="Traveler", role="user"),
        "other": User(email="other@example.com", name="Other", role="user"),
        "guide": User(email="guide@example.com", name="Guide", role="guide"),
        "guide2": User(email="guide2@example.com", name="Second Guide", role="guide"),
        "admin": User(email="admin@example.com", name="Admin", role="admin"),
    }
    async with session_factory() as session:
        session.add_all(created.values())
        await session.commit()
    return created


@pytest.fixture
async def package(session_factory) -> TourPackage:
    package = TourPackage(
        title="Sundarbans Mangrove Safari",
        location="Khulna",
        tour_type="wildlife",
        price=12500.0,
        duration_days=3,
        images=["https://img.example.com/sundarbans.jpg"],
        plan=[{"day": 1, "title": "Boat to Karamjal", "details": None}],
        created_by="admin@example.com",
    )
    async with session_factory() as session:
        session.add(package)
        await session.commit()
    return package


@pytest.fixture
def auth_headers():
    """Build a bearer header carrying a locally signed identity token."""

    def _headers(email: str) -> dict[str, str]:
        token = create_access_token(email, secret_key=TEST_SECRET)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.dependency_overrides[get_identity_verifier] = lambda: JWTIdentityVerifier(
        secret_key=TEST_SECRET
    )

    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    fastapi_app.dependency_overrides.clear()
