import asyncio
import os
from typing import AsyncGenerator

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("INIT_DB_ON_STARTUP", "false")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from allotment.client.api_client import AllotmentApiClient
from allotment.client.workspace import AllotmentWorkspace
from allotment.core.models import SchoolClass, Section, Student
from allotment.db.session import Base, configure_engine, get_db
from allotment.main import app


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture()
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory SQLite database (foreign keys on) for each test."""
    test_engine = configure_engine(
        create_async_engine(
            TEST_DATABASE_URL,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture()
def session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
async def db_session(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture()
async def client(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app, one DB session per request."""
    # All sessions share the single in-memory connection, so requests take turns.
    lock = asyncio.Lock()

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with lock:
            async with session_factory() as session:
                yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture()
async def workspace(client: AsyncClient) -> AllotmentWorkspace:
    return AllotmentWorkspace(AllotmentApiClient(client=client))


@pytest.fixture()
async def school(db_session: AsyncSession) -> dict:
    """Classes Nursery and 1st Grade, sections A and B, five students."""
    classes = [SchoolClass(name="Nursery"), SchoolClass(name="1st Grade")]
    sections = [Section(name="A"), Section(name="B")]
    students = [
        Student(name="Amy", age=7),
        Student(name="Ben", age=8),
        Student(name="Cara", age=6),
        Student(name="Dan", age=7),
        Student(name="Eli", age=8),
    ]
    db_session.add_all(classes + sections + students)
    await db_session.commit()
    return {
        "nursery": classes[0].id,
        "first": classes[1].id,
        "a": sections[0].id,
        "b": sections[1].id,
        "students": {s.name: s.id for s in students},
    }
