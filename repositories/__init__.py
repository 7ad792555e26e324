"""
Capa de repositorio para el acceso a datos.
Este paquete contiene el repositorio genérico que gestiona las operaciones
CRUD, soft delete, paginación y transacciones sobre SQLAlchemy.
Los repositorios proporcionan una abstracción sobre el ORM y no deben contener
lógica de negocio.

"""

from .base_repository import BaseRepository
from .interfaces import RepositoryProtocol
from .options import RepositoryOptions

__all__ = [
    "BaseRepository",
    "RepositoryOptions",
    "RepositoryProtocol",
]
