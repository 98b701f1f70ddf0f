"""
Repositorio que consulta las bases de datos existentes en el servidor
"""
import logging
from typing import List, Optional
import pymysql
from ..config import Config
from ..exceptions import ConnectivityError
from ..logger import LoggerService
from ..models import BackupTarget


class DatabaseRepository:
    """Lista las bases de datos de un servidor MySQL/MariaDB"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or LoggerService.get_logger("DatabaseRepository")

    def list_databases(self, target: BackupTarget) -> List[str]:
        """
        Ejecuta SHOW DATABASES en el servidor del target

        Args:
            target: Configuración del ciclo

        Returns:
            Nombres de las bases en el orden reportado por el servidor

        Raises:
            ConnectivityError: Si falla la conexión o la consulta
        """
        try:
            conn = pymysql.connect(
                host=target.host,
                port=target.port,
                user=target.user,
                password=target.password,
                connect_timeout=Config.CONNECT_TIMEOUT_SECONDS
            )
        except pymysql.MySQLError as e:
            raise ConnectivityError(
                f"No se pudo conectar a {target.host}:{target.port}: {e}"
            ) from e

        try:
            with conn.cursor() as cursor:
                cursor.execute("SHOW DATABASES")
                databases = [row[0] for row in cursor.fetchall()]
        except pymysql.MySQLError as e:
            raise ConnectivityError(f"Error ejecutando SHOW DATABASES: {e}") from e
        finally:
            conn.close()

        self.logger.info(f"Bases de datos en el servidor: {len(databases)}")
        return databases
