from .models import Base, SoftDeleteMixin, is_paranoid
from .db import (
    get_engine,
    get_session_factory,
    get_default_session_factory,
    create_tables,
    drop_tables,
    get_db,
)

__all__ = [
    "Base",
    "SoftDeleteMixin",
    "is_paranoid",
    "get_engine",
    "get_session_factory",
    "get_default_session_factory",
    "create_tables",
    "drop_tables",
    "get_db",
]
