"""pytest fixtures shared across all tests."""

from __future__ import annotations

import os

# Settings are read once (lru_cache), so the test environment must be in
# place before bizbuilder is imported.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-secret")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402

from bizbuilder.core.auth import PasswordHasher, TokenService  # noqa: E402
from bizbuilder.core.config import DEFAULT_PLAN_ID  # noqa: E402
from bizbuilder.core.plans import seed_plans  # noqa: E402
from bizbuilder.models.base import Base  # noqa: E402
from bizbuilder.services.auth import AuthService  # noqa: E402
from bizbuilder.services.users import UserStore  # noqa: E402

# Use SQLite in-memory for tests — no PostgreSQL required.
# Each test function gets its own fresh DB to avoid cross-test pollution.
TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

ACCESS_SECRET = "test-access-secret"
REFRESH_SECRET = "test-refresh-secret"


@pytest_asyncio.fixture
async def engine():
    """Create a fresh in-memory SQLite engine per test function, plans seeded."""
    eng = create_async_engine(
        TEST_DB_URL,
        echo=False,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(eng, expire_on_commit=False, autoflush=True)
    async with factory() as session:
        await seed_plans(session)
        await session.commit()
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Yield an async session bound to the test engine."""
    factory = async_sessionmaker(engine, expire_on_commit=False, autoflush=True)
    async with factory() as session:
        yield session


@pytest.fixture
def token_service():
    return TokenService(access_secret=ACCESS_SECRET, refresh_secret=REFRESH_SECRET)


@pytest.fixture
def auth_service(db_session, token_service):
    """AuthService over the test session with a fast bcrypt work factor."""
    return AuthService(
        store=UserStore(db_session),
        hasher=PasswordHasher(rounds=4),
        tokens=token_service,
        default_plan_id=DEFAULT_PLAN_ID,
    )


@pytest_asyncio.fixture
async def client(engine):
    """HTTPX async test client wired to the FastAPI app with a test DB."""
    from bizbuilder.api.app import create_app
    from bizbuilder.api.dependencies import get_db

    app = create_app()
    factory = async_sessionmaker(engine, expire_on_commit=False, autoflush=True)

    async def override_db():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac


async def register_user(
    client: AsyncClient,
    email: str = "owner@example.com",
    password: str = "s3cret-pass",
    name: str = "Shop Owner",
) -> dict:
    """Register through the API and return the response ``data`` block."""
    r = await client.post(
        "/api/users/register", json={"name": name, "email": email, "password": password}
    )
    assert r.status_code == 201, r.text
    # Tests authenticate explicitly with the bearer header
    client.cookies.clear()
    return r.json()["data"]


def bearer(data: dict) -> dict[str, str]:
    return {"Authorization": f"Bearer {data['accessToken']}"}


@pytest_asyncio.fixture
async def owner(client):
    """A registered user: response data plus ready-made auth headers."""
    data = await register_user(client)
    return {**data, "headers": bearer(data)}
