"""
Tests for engine/session helpers and the ORM base.
"""

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import StaticPool

from database.db import get_db, get_engine, get_session_factory
from database.models import is_paranoid
from tests.models import TagORM, UserORM

pytestmark = pytest.mark.anyio


class TestEngine:
    """Tests for get_engine and get_session_factory."""

    async def test_memory_engine_uses_static_pool(self):
        """Test in-memory SQLite shares one connection."""
        engine = get_engine("sqlite+aiosqlite:///:memory:")
        try:
            assert isinstance(engine.pool, StaticPool)
        finally:
            await engine.dispose()

    async def test_foreign_keys_enabled(self, db_engine):
        """Test the SQLite connect hook enables foreign keys."""
        async with db_engine.connect() as conn:
            result = await conn.execute(text("PRAGMA foreign_keys"))
            assert result.scalar_one() == 1

    async def test_session_factory_keeps_objects_loaded(self, db_engine):
        """Test sessions do not expire objects on commit."""
        factory = get_session_factory(db_engine)

        assert factory.kw["expire_on_commit"] is False


class TestGetDb:
    """Tests for the get_db dependency."""

    async def test_get_db_yields_session(self):
        """Test get_db yields an AsyncSession usable for queries."""
        gen = get_db()
        session = await gen.__anext__()
        try:
            assert isinstance(session, AsyncSession)
            assert (await session.execute(text("SELECT 1"))).scalar_one() == 1
        finally:
            await gen.aclose()


class TestModels:
    """Tests for the soft delete mixin."""

    async def test_is_paranoid(self):
        """Test only models with deleted_at are paranoid."""
        assert is_paranoid(UserORM) is True
        assert is_paranoid(TagORM) is False
