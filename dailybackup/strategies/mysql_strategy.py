"""
Estrategia de volcado para MySQL/MariaDB
"""
import os
from typing import Dict, List
from .base_strategy import DumpStrategy
from ..models import BackupTarget


class MySQLDumpStrategy(DumpStrategy):
    """Volcado lógico con mysqldump hacia stdout"""

    tool = "mysqldump"

    def build_command(self, target: BackupTarget, database: str) -> List[str]:
        """
        Construye el comando mysqldump para una base. La contraseña no va
        en la línea de comandos, ver build_env.

        Args:
            target: Configuración del ciclo
            database: Nombre de la base a volcar

        Returns:
            Lista de argumentos
        """
        return [
            self.tool,
            f'--host={target.host}',
            f'--port={target.port}',
            f'--user={target.user}',
            '--single-transaction',  # Para InnoDB sin bloqueo
            '--quick',               # Para tablas grandes
            '--routines',            # Incluir procedures y functions
            '--triggers',            # Incluir triggers
            database
        ]

    def build_env(self, target: BackupTarget) -> Dict[str, str]:
        env = os.environ.copy()
        env["MYSQL_PWD"] = target.password
        return env
