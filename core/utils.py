"""
Funciones de utilidad generales.
"""

from typing import Any, Mapping
from uuid import uuid4

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError

# SQLSTATE estándar para unique_violation (PostgreSQL, y drivers que lo exponen)
UNIQUE_VIOLATION_SQLSTATE = "23505"


def gen_uuid_str() -> str:
    """Genera un UUID4 aleatorio en su forma textual canónica."""
    return str(uuid4())


def to_values(data: Any) -> dict[str, Any]:
    """
    Normaliza un conjunto de atributos a un diccionario plano.

    Args:
        data: Mapping de atributos o modelo pydantic

    Returns:
        Diccionario nuevo; los modelos pydantic solo aportan los campos asignados
    """
    if isinstance(data, BaseModel):
        return data.model_dump(exclude_unset=True)
    if isinstance(data, Mapping):
        return dict(data)
    raise TypeError(f"Se esperaba un mapping o un modelo pydantic, no {type(data).__name__}")


def is_unique_violation(error: IntegrityError) -> bool:
    """
    Indica si un IntegrityError proviene de una restricción de unicidad.

    Si el driver expone un SQLSTATE, solo 23505 cuenta. Sin SQLSTATE se
    revisa el mensaje (SQLite: "UNIQUE constraint failed", MySQL: "Duplicate entry").
    """
    orig = getattr(error, "orig", None)
    for attr in ("sqlstate", "pgcode"):
        code = getattr(orig, attr, None)
        if code:
            return code == UNIQUE_VIOLATION_SQLSTATE
    message = str(orig if orig is not None else error).lower()
    return "unique constraint failed" in message or "duplicate entry" in message
