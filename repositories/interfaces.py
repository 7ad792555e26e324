"""
RepositoryProtocol: contrato público de los repositorios.

Sirve para tipar servicios que reciben un repositorio sin depender
de BaseRepository.
"""

from typing import Any, Awaitable, Callable, List, Optional, Protocol, TypeVar, runtime_checkable

from sqlalchemy.ext.asyncio import AsyncSession

from core.pagination import PaginatedResult

T = TypeVar("T")
R = TypeVar("R")


@runtime_checkable
class RepositoryProtocol(Protocol[T]):
    """Protocol for repository interfaces."""

    async def create(self, values: Any, **kwargs: Any) -> T: ...
    async def insert(self, values: Any, **kwargs: Any) -> T: ...
    async def insert_many(self, values_list: List[Any], **kwargs: Any) -> List[T]: ...
    async def find_by_pk(self, primary_key: Any, **kwargs: Any) -> Optional[T]: ...
    async def find_one(self, query: Any = None, **kwargs: Any) -> Optional[T]: ...
    async def find_all(self, query: Any = None, **kwargs: Any) -> List[T]: ...
    async def find_all_paginated(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        page: Optional[int] = None,
        query: Any = None,
        **kwargs: Any,
    ) -> PaginatedResult[T]: ...
    async def update_by_pk(self, primary_key: Any, values: Any, **kwargs: Any) -> Optional[T]: ...
    async def delete_by_pk(self, primary_key: Any, **kwargs: Any) -> Optional[T]: ...
    async def restore_by_pk(self, primary_key: Any, **kwargs: Any) -> Optional[T]: ...
    async def transaction(self, callback: Callable[[AsyncSession], Awaitable[R]]) -> R: ...
