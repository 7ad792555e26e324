""" Utilidades principales y componentes compartidos de la librería.

Este paquete contiene:

- Excepciones personalizadas
- Funciones auxiliares de paginación
- Traducción de excepciones a HTTP
- Utilidades generales
"""

from .exceptions import (
    AppException,
    NotFoundException,
    ValidationException,
    DuplicateException,
    DatabaseException,
    ProgrammerException,
)
from .pagination import (
    PaginatedResult,
    PaginationMeta,
    calculate_offset,
    calculate_pagination_meta,
)
from .http import to_http_exception
from .utils import (
    gen_uuid_str,
    is_unique_violation,
    to_values,
)

__all__ = [
    # Excepciones
    "AppException",
    "NotFoundException",
    "ValidationException",
    "DuplicateException",
    "DatabaseException",
    "ProgrammerException",
    # paginacion
    "PaginatedResult",
    "PaginationMeta",
    "calculate_offset",
    "calculate_pagination_meta",
    # http
    "to_http_exception",
    # utils
    "gen_uuid_str",
    "is_unique_violation",
    "to_values",
]
