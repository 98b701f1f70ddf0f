"""
Selección de la herramienta de volcado según DB_ENGINE
"""
from ..exceptions import ConfigurationError
from ..strategies.base_strategy import DumpStrategy
from ..strategies.mysql_strategy import MySQLDumpStrategy


class DumpStrategyFactory:
    """Mapea el motor configurado a su estrategia de volcado"""

    # MariaDB comparte cliente y formato con MySQL
    _strategies = {
        'mysql': MySQLDumpStrategy,
        'mariadb': MySQLDumpStrategy,
    }

    @classmethod
    def create(cls, engine: str) -> DumpStrategy:
        """
        Crea la estrategia del motor indicado

        Args:
            engine: Motor de base de datos (mysql, mariadb)

        Returns:
            Instancia de DumpStrategy

        Raises:
            ConfigurationError: Si el motor no es soportado
        """
        strategy_class = cls._strategies.get(engine.lower())
        if strategy_class is None:
            raise ConfigurationError(
                f"Motor no soportado: {engine} "
                f"(soportados: {', '.join(cls.get_supported_types())})"
            )
        return strategy_class()

    @classmethod
    def get_supported_types(cls) -> list:
        """Motores aceptados en DB_ENGINE"""
        return list(cls._strategies.keys())
