"""
Repositorios de configuración y de bases de datos
"""
from .config_repository import ConfigRepository
from .database_repository import DatabaseRepository

__all__ = [
    'ConfigRepository',
    'DatabaseRepository'
]
