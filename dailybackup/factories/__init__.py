"""
Factories del sistema de backup
"""
from .strategy_factory import DumpStrategyFactory

__all__ = ['DumpStrategyFactory']
