"""
Utilidades para manejo de fechas y zonas horarias.

Las marcas created_at/updated_at/deleted_at se guardan como datetimes
naive en la zona horaria configurada.
"""
from datetime import datetime
from zoneinfo import ZoneInfo
from config import settings


def get_local_timezone() -> ZoneInfo:
    """
    Obtiene la zona horaria configurada.

    Returns:
        ZoneInfo: Zona horaria de la aplicación.
    """
    return ZoneInfo(settings.timezone)


def get_local_now() -> datetime:
    """
    Obtiene la fecha y hora actual en la zona horaria local configurada.

    Returns:
        datetime: Fecha y hora actual con zona horaria.
    """
    return datetime.now(get_local_timezone())


def get_naive_now() -> datetime:
    """Hora local actual sin tzinfo, lista para columnas DateTime."""
    return get_local_now().replace(tzinfo=None)
