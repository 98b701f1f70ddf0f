"""
Repositorio para manejar configuración (Dependency Inversion)
"""
import logging
import os
from pathlib import Path
from typing import Mapping, Optional, Tuple
from ..config import Config, load_env_file
from ..exceptions import ConfigurationError
from ..logger import LoggerService
from ..models import BackupTarget


class ConfigRepository:
    """Construye el BackupTarget a partir de las variables de entorno"""

    REQUIRED_VARIABLES = (
        "DB_HOST",
        "DB_PORT",
        "DB_USERNAME",
        "DB_PASSWORD",
        "DB_FOLDER",
        "DB_ARCHIVE_PASSWORD",
    )

    def __init__(self, environ: Optional[Mapping[str, str]] = None,
                 env_file: Optional[Path] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Inicializa el repositorio de configuración

        Args:
            environ: Mapa de variables fijo; si se indica no se lee ningún .env
            env_file: .env a recargar en cada ciclo (por defecto el descubierto)
            logger: Logger a utilizar (opcional)
        """
        self.environ = environ
        self.env_file = env_file
        self._loaded_env_file = None
        self.logger = logger or LoggerService.get_logger("ConfigRepository")

    def load_target(self) -> BackupTarget:
        """
        Lee la configuración del ciclo. Se llama una vez por ciclo para
        que los cambios en el entorno se apliquen al siguiente.

        Returns:
            BackupTarget inmutable

        Raises:
            ConfigurationError: Si falta una variable o tiene formato inválido
        """
        if self.environ is not None:
            env = self.environ
        else:
            self._reload_env_file()
            env = os.environ

        missing = [name for name in self.REQUIRED_VARIABLES if not self._get(env, name)]
        if missing:
            raise ConfigurationError(f"Variables de entorno faltantes: {', '.join(missing)}")

        port = self._parse_int(env, "DB_PORT", None)
        keep_count = self._parse_int(env, "DB_BACKUP_FILE_KEEP_SIZE", Config.DEFAULT_KEEP_COUNT)
        exports = self._split_list(self._get(env, "DB_EXPORTS") or Config.WILDCARD)
        forgets = self._split_list(self._get(env, "DB_FORGETS"))
        dump_timeout = self._parse_int(env, "DB_DUMP_TIMEOUT", None)

        try:
            return BackupTarget(
                host=self._get(env, "DB_HOST"),
                port=port,
                user=self._get(env, "DB_USERNAME"),
                password=self._get(env, "DB_PASSWORD"),
                folder=Path(self._get(env, "DB_FOLDER")),
                archive_password=self._get(env, "DB_ARCHIVE_PASSWORD"),
                exports=exports,
                forgets=forgets,
                time_format=self._get(env, "DB_BACKUP_FILE_TIME_FORMAT") or None,
                keep_count=keep_count,
                engine=(self._get(env, "DB_ENGINE") or Config.DEFAULT_ENGINE).lower(),
                dump_timeout=dump_timeout,
            )
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

    def create_example_env(self, path: Optional[Path] = None) -> bool:
        """
        Crea un archivo .env.example con todas las variables soportadas

        Args:
            path: Ruta del archivo (por defecto Config.ENV_EXAMPLE_FILE)

        Returns:
            True si se creó exitosamente
        """
        path = path or Config.ENV_EXAMPLE_FILE
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(Config.ENV_EXAMPLE)
            self.logger.info(f"Creado: {path}")
            return True
        except OSError as e:
            self.logger.error(f"Error creando {path}: {e}")
            return False

    def _reload_env_file(self):
        """Vuelve a leer el .env para que las correcciones apliquen sin reiniciar"""
        loaded = load_env_file(self.env_file)
        if loaded is None:
            if self._loaded_env_file is not None:
                self.logger.warning(f"El archivo .env ya no existe: {self._loaded_env_file}")
        elif loaded != self._loaded_env_file:
            self.logger.info(f"Variables cargadas desde {loaded}")
        self._loaded_env_file = loaded

    def _get(self, env: Mapping[str, str], name: str) -> str:
        return self._resolve_reference(env, env.get(name, "").strip())

    def _resolve_reference(self, env: Mapping[str, str], value: str) -> str:
        """
        Resuelve valores del tipo ${OTRA_VARIABLE}

        Args:
            env: Mapa de variables
            value: Valor que puede contener referencia a variable de entorno

        Returns:
            Valor resuelto
        """
        if value.startswith("${") and value.endswith("}"):
            env_var = value[2:-1]
            resolved = env.get(env_var, "")
            if not resolved:
                self.logger.warning(f"Variable de entorno no encontrada: {env_var}")
            return resolved
        return value

    def _parse_int(self, env: Mapping[str, str], name: str, default: Optional[int]) -> int:
        raw = self._get(env, name)
        if not raw:
            return default
        try:
            return int(raw)
        except ValueError:
            raise ConfigurationError(f"{name} debe ser un entero: {raw!r}") from None

    @staticmethod
    def _split_list(raw: str) -> Tuple[str, ...]:
        """Separa una lista por comas sin vacíos ni duplicados"""
        items = []
        for item in raw.split(","):
            item = item.strip()
            if item and item not in items:
                items.append(item)
        return tuple(items)
