import uuid
from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import academy.models  # noqa: F401 - register with Base
from academy.catalog import service as catalog_service
from academy.config import Settings
from academy.database import get_db
from academy.dependencies import get_settings
from academy.main import app
from academy.models.course import Course
from academy.rate_limit import limiter
from shared.auth.config import AuthSettings
from shared.database.postgres import Base

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url=TEST_DATABASE_URL,
        redis_url="",
        certificate_price=Decimal("1000"),
        video_min_watch_secs=60,
    )


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
    settings: Settings,
) -> AsyncGenerator[AsyncClient, None]:
    async def _get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_settings] = lambda: settings
    limiter.reset()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Auth helpers
# ---------------------------------------------------------------------------


def make_token(
    user_id: uuid.UUID,
    *,
    roles: list[str] | None = None,
    email: str = "aluno@example.com",
    name: str | None = "Aluno Teste",
) -> str:
    auth = AuthSettings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email,
        "name": name,
        "roles": roles or ["user"],
        "iss": auth.issuer,
        "aud": auth.audience,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(hours=1)).timestamp()),
    }
    return jwt.encode(payload, auth.secret, algorithm=auth.algorithm)


def auth_headers(user_id: uuid.UUID, **kwargs) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id, **kwargs)}"}


@pytest.fixture
def user_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def admin_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def user_headers(user_id: uuid.UUID) -> dict[str, str]:
    return auth_headers(user_id)


@pytest.fixture
def admin_headers(admin_id: uuid.UUID) -> dict[str, str]:
    return auth_headers(admin_id, roles=["admin"], email="admin@example.com", name="Admin")


# ---------------------------------------------------------------------------
# Data helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def make_course(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., object]:
    """Create and commit a course; returns the detached ORM object."""

    async def _make(
        title: str = "HTML",
        *,
        payment_enabled: bool = True,
        price: str = "1000",
        **kwargs,
    ) -> Course:
        async with session_factory() as session:
            course = await catalog_service.create_course(
                session,
                title=title,
                payment_enabled=payment_enabled,
                price=Decimal(price),
                **kwargs,
            )
            await session.commit()
            return course

    return _make
