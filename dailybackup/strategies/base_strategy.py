"""
Estrategia base para volcados (Strategy Pattern)
"""
import logging
import shutil
import subprocess
import time
from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from ..logger import LoggerService
from ..models import BackupTarget, CommandResult


class DumpStrategy(ABC):
    """Interfaz abstracta para herramientas de volcado (Open/Closed Principle)"""

    tool: str = ""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """Inicializa la estrategia"""
        self.logger = logger or LoggerService.get_logger(self.__class__.__name__)

    @abstractmethod
    def build_command(self, target: BackupTarget, database: str) -> List[str]:
        """
        Construye la línea de comandos de la herramienta de volcado

        Args:
            target: Configuración del ciclo
            database: Nombre de la base a volcar

        Returns:
            Lista de argumentos para subprocess
        """
        pass

    def build_env(self, target: BackupTarget) -> Optional[Dict[str, str]]:
        """
        Variables de entorno del proceso de volcado (None = heredar las actuales)

        Args:
            target: Configuración del ciclo
        """
        return None

    def execute_dump(self, target: BackupTarget, database: str) -> CommandResult:
        """
        Template method: ejecuta la herramienta capturando stdout, stderr,
        código de salida y duración en microsegundos

        Args:
            target: Configuración del ciclo
            database: Nombre de la base a volcar

        Returns:
            Resultado del comando (nunca lanza por fallos de la herramienta)
        """
        tool_error = self._validate_tools([self.tool])
        if tool_error:
            return CommandResult(returncode=127, stderr=tool_error.encode("utf-8"))

        cmd = self.build_command(target, database)
        self.logger.info(f"Iniciando volcado de {database}...")
        start = time.perf_counter_ns()

        try:
            completed = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                env=self.build_env(target),
                timeout=target.dump_timeout
            )
        except subprocess.TimeoutExpired as e:
            return CommandResult(
                returncode=-1,
                stdout=e.stdout or b"",
                stderr=f"Timeout: el volcado tardó más de {target.dump_timeout}s".encode("utf-8"),
                duration_us=(time.perf_counter_ns() - start) // 1000
            )
        except OSError as e:
            return CommandResult(
                returncode=-1,
                stderr=str(e).encode("utf-8"),
                duration_us=(time.perf_counter_ns() - start) // 1000
            )

        return CommandResult(
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
            duration_us=(time.perf_counter_ns() - start) // 1000
        )

    def _validate_tools(self, tools: list) -> Optional[str]:
        """
        Valida que las herramientas necesarias estén disponibles

        Args:
            tools: Lista de herramientas requeridas

        Returns:
            None si todo está OK, mensaje de error en caso contrario
        """
        for tool in tools:
            if not shutil.which(tool):
                return f"La herramienta {tool} no está instalada"
        return None
