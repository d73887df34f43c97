"""
Shared fixtures: a throwaway SQLite database per test, the 2025 registry,
and an HTTP client wired to both through dependency overrides.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient

from velada.core.editions import get_registry, load_registry
from velada.database import build_engine, build_sessionmaker, create_tables, get_db
from velada.main import app
from velada.security.rbac import create_access_token
from velada.services import user_repository


@pytest.fixture
async def engine(tmp_path):
    """File-backed so separate sessions really use separate connections."""
    test_engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'velada_test.db'}")
    await create_tables(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_sessionmaker(engine)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def registry():
    return load_registry("2025")


@pytest.fixture
async def client(session_factory, registry):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_registry] = lambda: registry
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
async def user(db):
    created, _ = await user_repository.create_or_update_user(db, email="fan@example.com", name="Ana García")
    return created


@pytest.fixture
async def admin(db):
    created, _ = await user_repository.create_or_update_user(
        db, email="admin@example.com", name="Admin", is_admin=True
    )
    return created


def bearer(email: str, name: str = None) -> dict:
    return {"Authorization": f"Bearer {create_access_token(email, name=name)}"}


@pytest.fixture
def user_headers(user):
    return bearer(user.email)


@pytest.fixture
def admin_headers(admin):
    return bearer(admin.email)


@pytest.fixture
def token_headers():
    """Factory: headers carrying a fresh token for any email."""
    return bearer
