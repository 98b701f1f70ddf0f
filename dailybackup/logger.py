"""
Configuración de logging del proceso
"""
import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Optional
from .config import Config


class LoggerService:
    """
    Un único sink por proceso: el logger "dailybackup" con un archivo que
    rota a medianoche y la consola. Cada componente usa un hijo con su nombre.
    """

    ROOT_NAME = "dailybackup"
    LOG_FILE_NAME = "dailybackup.log"

    _configured = False

    @classmethod
    def configure(cls, level: Optional[int] = None, log_dir: Optional[Path] = None,
                  console: bool = True) -> logging.Logger:
        """
        Instala los handlers del proceso, reemplazando los anteriores

        Args:
            level: Nivel de log (por defecto Config.LOG_LEVEL)
            log_dir: Directorio del archivo de log (por defecto Config.LOG_DIR)
            console: Si es True también escribe en stdout

        Returns:
            Logger raíz del paquete
        """
        root = logging.getLogger(cls.ROOT_NAME)
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()

        level = level if level is not None else Config.LOG_LEVEL
        root.setLevel(level)
        root.propagate = False
        formatter = logging.Formatter(Config.LOG_FORMAT)

        log_dir = Path(log_dir or Config.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            log_dir / cls.LOG_FILE_NAME,
            when="midnight",
            backupCount=Config.LOG_BACKUP_COUNT,
            encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

        if console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(formatter)
            root.addHandler(console_handler)

        cls._configured = True
        return root

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        Logger de un componente; configura el sink por defecto si nadie lo hizo

        Args:
            name: Nombre del componente

        Returns:
            Logger hijo de "dailybackup"
        """
        if not cls._configured:
            cls.configure()
        return logging.getLogger(f"{cls.ROOT_NAME}.{name}")
