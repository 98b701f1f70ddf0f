"""
Estrategias de volcado para diferentes motores de BD
"""
from .base_strategy import DumpStrategy
from .mysql_strategy import MySQLDumpStrategy

__all__ = [
    'DumpStrategy',
    'MySQLDumpStrategy'
]
