"""
Utilidades del sistema.
"""
from .datetime_utils import get_local_now, get_local_timezone, get_naive_now

__all__ = ["get_local_now", "get_local_timezone", "get_naive_now"]
