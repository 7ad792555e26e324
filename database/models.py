from sqlalchemy import Column, DateTime
from sqlalchemy.orm import declarative_base

from utils.datetime_utils import get_naive_now

Base = declarative_base()


#Mixin: marcas temporales + soft delete
class SoftDeleteMixin:
    """
    Columnas created_at / updated_at / deleted_at.

    Un modelo que mapea deleted_at es "paranoid": sus filas se marcan como
    eliminadas en lugar de borrarse, y las lecturas por defecto las excluyen.
    """
    created_at = Column(DateTime, default=get_naive_now, nullable=False)
    updated_at = Column(DateTime, default=get_naive_now, onupdate=get_naive_now, nullable=False)
    deleted_at = Column(DateTime, nullable=True, default=None)


def is_paranoid(model_class) -> bool:
    """True si el modelo tiene la columna deleted_at."""
    return hasattr(model_class, "deleted_at")
