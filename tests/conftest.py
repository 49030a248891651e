"""Pytest configuration and fixtures."""
import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from storyboard.core.state_store import ProjectStateStore
from storyboard.db.database import Base
from storyboard.persistence.gateway import InMemoryGateway
from storyboard.persistence.sql_gateway import SqlAlchemyGateway


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def gateway() -> InMemoryGateway:
    return InMemoryGateway()


@pytest.fixture
def store(gateway: InMemoryGateway) -> ProjectStateStore:
    """A store holding the default 3 × 5 project, history reset to it."""
    s = ProjectStateStore(gateway=gateway)
    s.clear_all_content()
    return s


@pytest.fixture
async def session_factory():
    """In-memory SQLite session factory with the schema created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    yield factory

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def sql_gateway(session_factory) -> SqlAlchemyGateway:
    return SqlAlchemyGateway(session_factory, key="test-project")
