"""
Opciones de construcción de un repositorio.
"""

import logging
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.utils import gen_uuid_str


class RepositoryOptions(BaseModel):
    """
    Configuración inmutable de un repositorio concreto.

    Attributes:
        id_field: Atributo que actúa como clave primaria
        auto_generate_id: Generar la clave en create/insert_many cuando falta
        id_generator: Función sin argumentos que produce una clave nueva
        include_all_by_default: Cargar todas las relaciones en las lecturas
        logger: Logger a usar en lugar del logger por defecto del repositorio
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    id_field: str = Field("id", min_length=1)
    auto_generate_id: bool = False
    id_generator: Callable[[], Any] = gen_uuid_str
    include_all_by_default: bool = False
    logger: Optional[logging.Logger] = None
