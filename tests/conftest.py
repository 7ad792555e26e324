"""
Configuración de fixtures para pytest.

Este módulo contiene fixtures reutilizables para todos los tests.
"""

import os
from typing import AsyncGenerator, Dict, Any

import pytest

# Configurar para usar base de datos en memoria para tests
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from database.db import get_engine, get_session_factory, create_tables, drop_tables
from tests.models import UserORM, UserRepository, PostRepository, TagRepository


@pytest.fixture
def anyio_backend():
    """Run async tests on asyncio only."""
    return "asyncio"


# ==================== Database Fixtures ====================

@pytest.fixture(scope="function")
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory SQLite database engine for testing."""
    engine = get_engine("sqlite+aiosqlite:///:memory:")
    await create_tables(engine)
    yield engine
    await drop_tables(engine)
    await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker:
    """Session factory bound to the test engine."""
    return get_session_factory(db_engine)


# ==================== Repository Fixtures ====================

@pytest.fixture
def user_repository(session_factory: async_sessionmaker) -> UserRepository:
    """Create a UserRepository instance."""
    return UserRepository(session_factory)


@pytest.fixture
def post_repository(session_factory: async_sessionmaker) -> PostRepository:
    """Create a PostRepository instance."""
    return PostRepository(session_factory)


@pytest.fixture
def tag_repository(session_factory: async_sessionmaker) -> TagRepository:
    """Create a TagRepository instance."""
    return TagRepository(session_factory)


# ==================== User Fixtures ====================

@pytest.fixture
def user_data() -> Dict[str, Any]:
    """Sample user data for testing."""
    return {
        "name": "Alice",
        "email": "alice@example.com",
    }


@pytest.fixture
async def user_instance(
    user_repository: UserRepository,
    user_data: Dict[str, Any]
) -> UserORM:
    """Create a user in the database."""
    return await user_repository.create(user_data)


# ==================== Utility Functions ====================

def assert_valid_uuid(uuid_string: str) -> bool:
    """Assert that a string is a valid UUID."""
    from uuid import UUID
    try:
        UUID(str(uuid_string))
        return True
    except (ValueError, AttributeError):
        return False
