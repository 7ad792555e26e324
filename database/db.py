"""módulo de base de datos: engine async, fábrica de sesiones y creación de tablas."""
from functools import lru_cache
from typing import AsyncGenerator, Optional
import logging

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from .models import Base

#import configuration
from config import settings

logger = logging.getLogger(__name__)


def get_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """Crea el engine async.

    Args:
        database_url: URL a usar; por defecto settings.database_url

    Note:
        - SQLite en memoria usa StaticPool para compartir una sola conexión
        - Para SQLite se activa PRAGMA foreign_keys en cada conexión
    """
    url = database_url or settings.database_url
    engine_kwargs = {
        "echo": settings.debug_mode,
        "future": True,
    }
    if url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url or url.split("://", 1)[-1] in ("", "/"):
            engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs["pool_pre_ping"] = True  #verifica conexiones antes de usarlas
        engine_kwargs["pool_recycle"] = 3600   #recicla conexiones cada hora

    engine = create_async_engine(url, **engine_kwargs)

    if url.startswith("sqlite"):
        @event.listens_for(engine.sync_engine, "connect")
        def _set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def get_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Fábrica de sesiones para los repositorios.

    expire_on_commit=False: las entidades devueltas por un repositorio siguen
    legibles después del commit de su sesión.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@lru_cache(maxsize=1)
def get_default_session_factory() -> async_sessionmaker:
    """Fábrica de sesiones perezosa sobre settings.database_url."""
    return get_session_factory(get_engine())


async def create_tables(engine: AsyncEngine) -> None:
    """Crear tablas ORM en la base de datos.

    Raises:
        SQLAlchemyError: Si hay error al crear las tablas
    """
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Tablas de base de datos creadas/verificadas exitosamente")
    except SQLAlchemyError as e:
        logger.error(f"Error al crear tablas: {e}", exc_info=True)
        raise


async def drop_tables(engine: AsyncEngine) -> None:
    """Eliminar todas las tablas ORM (usado por los tests)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """dependencia de FastAPI que provee una sesión con manejo de errores.

    Yields:
        AsyncSession: sesión de SQLAlchemy, usable como handle de transacción

    Nota:
        - Commit al terminar la petición sin errores
        - Rollback automático si hay excepciones
    """
    async with get_default_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error de base de datos en sesión: {e}")
            await session.rollback()
            raise
        except Exception:
            await session.rollback()
            raise
