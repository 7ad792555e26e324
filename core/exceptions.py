"""
Excepciones personalizadas para la capa de repositorios.

Estas excepciones proporcionan una forma estructurada de señalar los errores
del almacén de datos y mapearlos a códigos de estado HTTP apropiados en la
capa de API (ver core.http).
"""

from typing import Optional, Any


class AppException(Exception):
    """Excepción base para todos los errores de la librería."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundException(AppException):
    """Excepción cuando un recurso no se encuentra."""

    def __init__(
        self,
        resource: str,
        identifier: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        message = f"{resource} no encontrado"
        if identifier:
            message += f": {identifier}"
        super().__init__(message=message, status_code=404, details=details)


class ValidationException(AppException):
    """Excepción para argumentos inválidos (paginación, atributos desconocidos)."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        if field:
            details = details or {}
            details["field"] = field
        super().__init__(message=message, status_code=422, details=details)


class DuplicateException(AppException):
    """Excepción cuando una restricción de unicidad impide crear el recurso."""

    def __init__(
        self,
        resource: str,
        details: Optional[dict[str, Any]] = None,
    ):
        message = f"{resource} duplicado (ya existe)"
        super().__init__(message=message, status_code=409, details=details)


class DatabaseException(AppException):
    """Excepción para cualquier otro error del almacén de datos."""

    def __init__(
        self,
        message: str = "Error de base de datos",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message=message, status_code=500, details=details)


class ProgrammerException(AppException):
    """Uso incorrecto de la librería, p. ej. instanciar BaseRepository directamente."""

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message=message, status_code=500, details=details)
