"""
Repositorio base asíncrono con operaciones CRUD comunes:
Este repositorio genérico proporciona operaciones de base de datos estándar
(CRUD, soft delete / restore, paginación y transacciones) que se reutilizan
en todos los repositorios de entidades.

Cada llamada abre su propia sesión y hace commit al terminar, salvo que reciba
`transaction=<AsyncSession>`: en ese caso solo hace flush y el commit queda en
manos de quien abrió la transacción (ver BaseRepository.transaction).
"""

from contextlib import asynccontextmanager
from typing import (
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    Generic,
    List,
    Mapping,
    Optional,
    Sequence,
    Type,
    TypeVar,
    Union,
)
import logging

from sqlalchemy import Select, asc, desc, func, inspect, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload
from sqlalchemy.sql.elements import ColumnElement

from config import settings
from core.exceptions import (
    DatabaseException,
    DuplicateException,
    NotFoundException,
    ProgrammerException,
    ValidationException,
)
from core.pagination import PaginatedResult, calculate_offset
from core.utils import is_unique_violation, to_values
from database.models import is_paranoid
from repositories.options import RepositoryOptions
from utils.datetime_utils import get_naive_now

T = TypeVar('T')
R = TypeVar('R')

PrimaryKey = Union[str, int]
# Mapping -> igualdad por atributo (None = IS NULL); expresiones -> tal cual
Query = Union[Mapping[str, Any], ColumnElement, Sequence[ColumnElement], None]


class BaseRepository(Generic[T]):
    """
    Repositorio genérico que proporciona operaciones CRUD estándar.

    Esta clase debe ser heredada por repositorios de entidades específicos;
    instanciarla directamente lanza ProgrammerException.

    Example:
        class UserRepository(BaseRepository[UserORM]):
            def __init__(self, session_factory):
                super().__init__(
                    session_factory,
                    UserORM,
                    RepositoryOptions(auto_generate_id=True),
                )
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        model_class: Type[T],
        options: Optional[RepositoryOptions] = None,
    ):
        """
        Inicializa el repositorio.

        Args:
            session_factory: Fábrica de sesiones async (ver database.db.get_session_factory)
            model_class: Clase del modelo ORM para este repositorio
            options: Opciones del repositorio

        Raises:
            ProgrammerException: Si se instancia BaseRepository directamente o
                el modelo no tiene el campo de clave primaria configurado
        """
        if type(self) is BaseRepository:
            raise ProgrammerException("BaseRepository cannot be instantiated directly")

        options = options or RepositoryOptions()
        if not hasattr(model_class, options.id_field):
            raise ProgrammerException(
                f"{model_class.__name__} no tiene el campo '{options.id_field}'"
            )

        self.session_factory = session_factory
        self.model_class = model_class
        self.options = options
        self.logger = options.logger or logging.getLogger(f"repositories.{type(self).__name__}")

        if getattr(session_factory, "kw", {}).get("expire_on_commit", True):
            self.logger.warning(
                "La fábrica de sesiones usa expire_on_commit=True; las entidades "
                "devueltas no serán legibles fuera de su sesión"
            )

    @property
    def model_name(self) -> str:
        return self.model_class.__name__

    @property
    def id_field(self) -> str:
        return self.options.id_field

    @property
    def paranoid(self) -> bool:
        return is_paranoid(self.model_class)

    # ==================== Helpers ====================

    @asynccontextmanager
    async def _session_scope(self, transaction: Optional[AsyncSession]) -> AsyncIterator[AsyncSession]:
        """Usa la transacción recibida o abre una sesión propia con commit al salir."""
        if transaction is not None:
            yield transaction
            return
        async with self.session_factory() as session:
            async with session.begin():
                yield session

    def _prepare(self, values: Any, generate_id: bool = True) -> dict[str, Any]:
        """Normaliza los atributos, rechaza nombres desconocidos y genera la clave."""
        try:
            data = to_values(values)
        except TypeError as e:
            raise ValidationException(str(e))

        known = inspect(self.model_class).attrs.keys()
        for field in data:
            if field not in known:
                raise ValidationException(
                    f"{self.model_name} no tiene el atributo '{field}'",
                    field=field,
                )

        if generate_id and self.options.auto_generate_id and data.get(self.id_field) is None:
            data[self.id_field] = self.options.id_generator()
        return data

    def _use_eager(self, eager: Optional[bool]) -> bool:
        return self.options.include_all_by_default if eager is None else eager

    def _filtered(self, query: Query, include_deleted: bool) -> Select:
        stmt = select(self.model_class)
        if query is not None:
            if isinstance(query, Mapping):
                stmt = stmt.filter_by(**query)
            elif isinstance(query, (list, tuple)):
                stmt = stmt.where(*query)
            else:
                stmt = stmt.where(query)
        # Filter soft-deleted records
        if self.paranoid and not include_deleted:
            stmt = stmt.where(self.model_class.deleted_at.is_(None))
        return stmt

    def _ordered(self, stmt: Select, order_by: Optional[str], order_desc: bool) -> Select:
        if order_by and hasattr(self.model_class, order_by):
            order_field = getattr(self.model_class, order_by)
            stmt = stmt.order_by(desc(order_field) if order_desc else asc(order_field))
        return stmt

    def _loading(self, stmt: Select, eager: Optional[bool]) -> Select:
        if self._use_eager(eager):
            stmt = stmt.options(selectinload("*"))
        return stmt

    async def _get(
        self,
        session: AsyncSession,
        primary_key: PrimaryKey,
        include_deleted: bool = False,
        eager: Optional[bool] = None,
    ) -> Optional[T]:
        id_column = getattr(self.model_class, self.id_field)
        stmt = self._loading(self._filtered(None, include_deleted), eager).where(id_column == primary_key)
        result = await session.execute(stmt)
        return result.scalars().first()

    async def _refresh(self, session: AsyncSession, entity: T, eager: Optional[bool] = None) -> None:
        await session.refresh(entity)
        if self._use_eager(eager):
            relationships = list(inspect(self.model_class).relationships.keys())
            if relationships:
                await session.refresh(entity, attribute_names=relationships)

    def _store_error(self, operation: str, error: Exception) -> DatabaseException:
        self.logger.error(f"{operation}: Error en {self.model_name}: {error}")
        return DatabaseException(f"Error en {operation} de {self.model_name}")

    def _integrity_error(self, operation: str, error: IntegrityError) -> Exception:
        if is_unique_violation(error):
            self.logger.error(f"{operation}: {self.model_name} ya existe: {error}")
            return DuplicateException(resource=self.model_name)
        return self._store_error(operation, error)

    # ==================== Create ====================

    async def create(
        self,
        values: Any,
        *,
        transaction: Optional[AsyncSession] = None,
        eager: Optional[bool] = None,
    ) -> T:
        """
        Crea una nueva entidad.

        Args:
            values: Atributos (mapping o modelo pydantic)
            transaction: Sesión de una transacción en curso
            eager: Cargar relaciones de la entidad creada

        Returns:
            The created entity

        Raises:
            DuplicateException: Si se viola una restricción de unicidad
            DatabaseException: Ante cualquier otro error de base de datos
        """
        data = self._prepare(values)
        try:
            async with self._session_scope(transaction) as session:
                entity = self.model_class(**data)
                session.add(entity)
                await session.flush()
                await self._refresh(session, entity, eager)
            return entity
        except IntegrityError as e:
            raise self._integrity_error("create", e)
        except SQLAlchemyError as e:
            raise self._store_error("create", e)

    async def insert(
        self,
        values: Any,
        *,
        transaction: Optional[AsyncSession] = None,
        eager: Optional[bool] = None,
    ) -> T:
        """Alias de create."""
        return await self.create(values, transaction=transaction, eager=eager)

    async def insert_many(
        self,
        values_list: Sequence[Any],
        *,
        transaction: Optional[AsyncSession] = None,
        eager: Optional[bool] = None,
    ) -> List[T]:
        """
        Crea varias entidades en una sola operación.

        Con auto_generate_id cada elemento recibe su propia clave.

        Returns:
            Las entidades creadas, en el mismo orden que values_list
        """
        rows = [self._prepare(values) for values in values_list]
        if not rows:
            return []
        try:
            async with self._session_scope(transaction) as session:
                entities = [self.model_class(**data) for data in rows]
                session.add_all(entities)
                await session.flush()
                for entity in entities:
                    await self._refresh(session, entity, eager)
            return entities
        except IntegrityError as e:
            raise self._integrity_error("insert_many", e)
        except SQLAlchemyError as e:
            raise self._store_error("insert_many", e)

    # ==================== Read ====================

    async def find_by_pk(
        self,
        primary_key: PrimaryKey,
        *,
        include_deleted: bool = False,
        transaction: Optional[AsyncSession] = None,
        eager: Optional[bool] = None,
    ) -> Optional[T]:
        """
        Obtiene una entidad por su clave primaria.

        Args:
            primary_key: Valor de la clave primaria
            include_deleted: Incluir entidades con soft delete

        Returns:
            The entity or None if not found
        """
        try:
            async with self._session_scope(transaction) as session:
                return await self._get(session, primary_key, include_deleted, eager)
        except SQLAlchemyError as e:
            raise self._store_error("find_by_pk", e)

    async def find_by_pk_or_fail(
        self,
        primary_key: PrimaryKey,
        *,
        include_deleted: bool = False,
        transaction: Optional[AsyncSession] = None,
        eager: Optional[bool] = None,
    ) -> T:
        """
        Igual que find_by_pk, pero lanza una excepción si no se encuentra.

        Raises:
            NotFoundException: If entity is not found
        """
        entity = await self.find_by_pk(
            primary_key,
            include_deleted=include_deleted,
            transaction=transaction,
            eager=eager,
        )
        if entity is None:
            raise NotFoundException(
                resource=self.model_name,
                identifier=str(primary_key)
            )
        return entity

    async def find_one(
        self,
        query: Query = None,
        *,
        include_deleted: bool = False,
        transaction: Optional[AsyncSession] = None,
        eager: Optional[bool] = None,
        order_by: Optional[str] = None,
        order_desc: bool = False,
    ) -> Optional[T]:
        """Primera entidad que cumple la consulta, o None."""
        try:
            async with self._session_scope(transaction) as session:
                stmt = self._ordered(self._filtered(query, include_deleted), order_by, order_desc)
                result = await session.execute(self._loading(stmt, eager).limit(1))
                return result.scalars().first()
        except SQLAlchemyError as e:
            raise self._store_error("find_one", e)

    async def find_all(
        self,
        query: Query = None,
        *,
        include_deleted: bool = False,
        transaction: Optional[AsyncSession] = None,
        eager: Optional[bool] = None,
        order_by: Optional[str] = None,
        order_desc: bool = False,
    ) -> List[T]:
        """
        Obtiene todas las entidades que cumplen la consulta.

        Args:
            query: Mapping de igualdades o expresiones SQLAlchemy
            include_deleted: Si se incluyen los registros eliminados
            order_by: Field name to order by
            order_desc: Whether to order descending

        Returns:
            List of entities (posiblemente vacía)
        """
        try:
            async with self._session_scope(transaction) as session:
                stmt = self._ordered(self._filtered(query, include_deleted), order_by, order_desc)
                result = await session.execute(self._loading(stmt, eager))
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise self._store_error("find_all", e)

    async def find_all_paginated(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        page: Optional[int] = None,
        query: Query = None,
        *,
        include_deleted: bool = False,
        transaction: Optional[AsyncSession] = None,
        eager: Optional[bool] = None,
        order_by: Optional[str] = None,
        order_desc: bool = False,
    ) -> PaginatedResult[T]:
        """
        Obtiene una página de entidades junto con el total de coincidencias.

        Si se indica page y no offset, offset = limit * (page - 1).
        Sin order_by se ordena por la clave primaria.

        Args:
            limit: Elementos por página (por defecto settings.default_page_limit)
            offset: Número de registros a saltar (por defecto 0)
            page: Número de página, desde 1
            query: Mapping de igualdades o expresiones SQLAlchemy

        Returns:
            PaginatedResult con rows y count; count ignora limit/offset

        Raises:
            ValidationException: Si limit, offset o page están fuera de rango
        """
        if limit is None:
            limit = settings.default_page_limit
        if limit < 1:
            raise ValidationException("limit debe ser >= 1", field="limit")
        if settings.max_page_limit is not None and limit > settings.max_page_limit:
            raise ValidationException(
                f"limit debe ser <= {settings.max_page_limit}",
                field="limit",
            )
        if offset is None:
            if page is not None:
                if page < 1:
                    raise ValidationException("page debe ser >= 1", field="page")
                offset = self.calculate_offset(limit, page)
            else:
                offset = 0
        elif offset < 0:
            raise ValidationException("offset debe ser >= 0", field="offset")

        try:
            async with self._session_scope(transaction) as session:
                filtered = self._filtered(query, include_deleted)
                count_stmt = select(func.count()).select_from(filtered.subquery())
                count = (await session.execute(count_stmt)).scalar_one()

                # sin order_by, la clave primaria da páginas estables
                stmt = self._ordered(filtered, order_by or self.id_field, order_desc)
                stmt = self._loading(stmt, eager)
                result = await session.execute(stmt.limit(limit).offset(offset))
                rows = list(result.scalars().all())
            return PaginatedResult(rows=rows, count=count)
        except SQLAlchemyError as e:
            raise self._store_error("find_all_paginated", e)

    async def count(
        self,
        query: Query = None,
        *,
        include_deleted: bool = False,
        transaction: Optional[AsyncSession] = None,
    ) -> int:
        """Cuenta las entidades que coinciden con la consulta."""
        try:
            async with self._session_scope(transaction) as session:
                stmt = select(func.count()).select_from(self._filtered(query, include_deleted).subquery())
                return (await session.execute(stmt)).scalar_one()
        except SQLAlchemyError as e:
            raise self._store_error("count", e)

    async def exists(
        self,
        primary_key: PrimaryKey,
        *,
        include_deleted: bool = False,
        transaction: Optional[AsyncSession] = None,
    ) -> bool:
        """
        Verifica si una entidad existe por su clave primaria.

        Returns:
            True si la entidad existe, False en caso contrario
        """
        entity = await self.find_by_pk(
            primary_key,
            include_deleted=include_deleted,
            transaction=transaction,
            eager=False,
        )
        return entity is not None

    # ==================== Update / Delete ====================

    async def update_by_pk(
        self,
        primary_key: PrimaryKey,
        values: Any,
        *,
        transaction: Optional[AsyncSession] = None,
    ) -> Optional[T]:
        """
        Actualiza parcialmente una entidad existente.

        Args:
            primary_key: Valor de la clave primaria
            values: Atributos a modificar (mapping o modelo pydantic)

        Returns:
            La entidad actualizada, o None si no existe (o tiene soft delete)
        """
        data = self._prepare(values, generate_id=False)
        try:
            async with self._session_scope(transaction) as session:
                entity = await self._get(session, primary_key)
                if entity is None:
                    return None
                for field, value in data.items():
                    setattr(entity, field, value)
                await session.flush()
                await self._refresh(session, entity)
            return entity
        except IntegrityError as e:
            raise self._integrity_error("update_by_pk", e)
        except SQLAlchemyError as e:
            raise self._store_error("update_by_pk", e)

    async def delete_by_pk(
        self,
        primary_key: PrimaryKey,
        *,
        force: bool = False,
        transaction: Optional[AsyncSession] = None,
    ) -> Optional[T]:
        """
        Elimina una entidad (eliminación suave por defecto).

        Con force=True la fila se borra físicamente, aunque ya tuviera
        soft delete. Los modelos sin deleted_at siempre se borran físicamente.

        Args:
            primary_key: Valor de la clave primaria
            force: Si True, realizar eliminación dura

        Returns:
            La entidad eliminada, o None si no existe
        """
        try:
            async with self._session_scope(transaction) as session:
                entity = await self._get(session, primary_key, include_deleted=force, eager=False)
                if entity is None:
                    return None
                if self.paranoid and not force:
                    entity.deleted_at = get_naive_now()
                    await session.flush()
                    await session.refresh(entity)
                else:
                    await session.delete(entity)
                    await session.flush()
            self.logger.debug(f"delete_by_pk: {self.model_name} {primary_key} (force={force})")
            return entity
        except SQLAlchemyError as e:
            raise self._store_error("delete_by_pk", e)

    async def restore_by_pk(
        self,
        primary_key: PrimaryKey,
        *,
        transaction: Optional[AsyncSession] = None,
    ) -> Optional[T]:
        """
        Restaura una entidad eliminada (eliminación suave).

        Returns:
            La entidad restaurada, o None si no existe

        Raises:
            ProgrammerException: Si el modelo no tiene soft delete
        """
        if not self.paranoid:
            raise ProgrammerException(f"{self.model_name} no tiene soft delete; no se puede restaurar")
        try:
            async with self._session_scope(transaction) as session:
                entity = await self._get(session, primary_key, include_deleted=True, eager=False)
                if entity is None:
                    return None
                entity.deleted_at = None
                await session.flush()
                await session.refresh(entity)
            return entity
        except SQLAlchemyError as e:
            raise self._store_error("restore_by_pk", e)

    # ==================== Transactions ====================

    async def transaction(self, callback: Callable[[AsyncSession], Awaitable[R]]) -> R:
        """
        Ejecuta callback dentro de una transacción.

        El callback recibe la sesión, que debe pasarse como `transaction=` a
        cada llamada del repositorio que deba formar parte de la unidad.
        Commit si el callback termina; rollback y re-raise del error original
        si falla.

        Raises:
            DatabaseException: Si falla el commit
        """
        async with self.session_factory() as session:
            try:
                result = await callback(session)
            except Exception as e:
                self.logger.error(f"transaction: rollback en {self.model_name}: {e}")
                await session.rollback()
                raise
            try:
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise self._store_error("transaction", e)
            return result

    @staticmethod
    def calculate_offset(limit: int, page: int) -> int:
        """Offset de la página `page` (desde 1) para un límite dado."""
        return calculate_offset(limit, page)
