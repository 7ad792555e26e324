"""
Utilidades de paginación para una paginación consistente en todos los repositorios.

Las páginas se numeran desde 1.
"""

from typing import TypeVar, Generic, List
from pydantic import BaseModel, ConfigDict, Field

T = TypeVar('T')


class PaginatedResult(BaseModel, Generic[T]):
    """Resultado de find_all_paginated: filas de la página y total sin límite."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    rows: List[T] = Field(default_factory=list, description="Entities in the requested window")
    count: int = Field(..., ge=0, description="Total matching rows, ignoring limit/offset")


class PaginationMeta(BaseModel):
    """Metadata para la paginacion."""
    page: int = Field(..., ge=1, description="Current page number (1-indexed)")
    limit: int = Field(..., ge=1, description="Page size")
    total_items: int = Field(..., ge=0, description="Total items available")
    total_pages: int = Field(..., ge=0, description="Total pages")
    has_next: bool = Field(..., description="Has next page")
    has_previous: bool = Field(..., description="Has previous page")


def calculate_offset(limit: int, page: int) -> int:
    """
    Calcula el offset para las consultas de la base de datos.

    Args:
        limit: Número de elementos por página
        page: Número de página actual (indexado desde 1)

    Returns:
        Número de elementos a saltar
    """
    return limit * (page - 1)


def calculate_pagination_meta(
    page: int,
    limit: int,
    total_items: int
) -> PaginationMeta:
    """
    Calcula la metadata de la paginación a partir del count de find_all_paginated.

    Args:
        page: Número de página actual (1-indexed)
        limit: Items por página
        total_items: Total number of items

    Returns:
        PaginationMeta con valores calculados
    """
    total_pages = (total_items + limit - 1) // limit if limit > 0 else 0

    return PaginationMeta(
        page=page,
        limit=limit,
        total_items=total_items,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_previous=page > 1
    )
