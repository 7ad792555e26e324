"""
Configuración centralizada de la librería usando pydantic-settings.

Este módulo maneja las variables de entorno que afectan a la capa de
repositorios (conexión, paginación, logging y zona horaria) de manera
tipada y validada.
"""
import logging
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Configuración cargada desde variables de entorno."""

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./repository.db",
        description="URL de conexión async a la base de datos"
    )
    debug_mode: bool = Field(
        default=False,
        description="Modo debug: imprime el SQL generado por el engine"
    )

    # Paginación
    default_page_limit: int = Field(
        default=10,
        ge=1,
        description="Límite por defecto para find_all_paginated"
    )
    max_page_limit: Optional[int] = Field(
        default=None,
        ge=1,
        description="Límite máximo por página; None = sin tope"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Nivel de logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # Timezone
    timezone: str = Field(
        default="UTC",
        description="Zona horaria usada para las marcas de soft delete (formato IANA)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Valida que el nivel de logging sea válido."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            logger.warning(
                f"Nivel de log '{v}' no válido. Usando 'INFO'. "
                f"Niveles válidos: {valid_levels}"
            )
            return "INFO"
        return v_upper

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Valida que la zona horaria exista; si no, usa UTC."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Zona horaria '{v}' no válida. Usando 'UTC'.")
            return "UTC"
        return v

    @property
    def is_sqlite(self) -> bool:
        """Indica si la URL configurada apunta a SQLite."""
        return self.database_url.startswith("sqlite")


# Instancia global de configuración
settings = Settings()


def configure_logging():
    """Configura el sistema de logging de la aplicación."""
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format=log_format,
        handlers=[
            logging.StreamHandler(),
        ]
    )

    # Reducir verbosidad de librerías externas
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)

    logger.info(f"Logging configurado en nivel {settings.log_level}")


def get_settings() -> Settings:
    """Retorna la instancia de configuración (útil para dependency injection)."""
    return settings
