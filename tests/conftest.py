import os

# Antes de importar reviewflow: la configuración se lee al importar
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from reviewflow import models  # noqa: F401
from reviewflow.core.database import Base, get_db
from reviewflow.core.security import generate_api_key
from reviewflow.models import User


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


async def _create_user(session: AsyncSession, email: str) -> User:
    user = User(email=email, name=email.split("@")[0], api_key=generate_api_key())
    session.add(user)
    await session.commit()
    return user


@pytest_asyncio.fixture
async def user(session):
    return await _create_user(session, "owner@example.com")


@pytest_asyncio.fixture
async def other_user(session):
    return await _create_user(session, "intruder@example.com")


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {user.api_key}"}


@pytest_asyncio.fixture
async def client(session_maker):
    from reviewflow.main import app

    async def override_get_db():
        async with session_maker() as db:
            yield db

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
