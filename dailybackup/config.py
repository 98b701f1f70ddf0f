"""
Configuración centralizada del sistema de backup
"""
import logging
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv, find_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def discover_env_file(fallback_dir: Optional[Path] = None) -> Optional[Path]:
    """
    Busca el .env subiendo desde el directorio actual; si no existe usa
    el .env junto a main.py (servicios lanzados desde otro directorio)

    Args:
        fallback_dir: Directorio alternativo (por defecto la raíz del proyecto)

    Returns:
        Ruta del .env o None si no hay ninguno
    """
    found = find_dotenv(usecwd=True)
    if found:
        return Path(found)
    candidate = (fallback_dir or PROJECT_ROOT) / ".env"
    return candidate if candidate.is_file() else None


def load_env_file(env_file: Optional[Path] = None) -> Optional[Path]:
    """
    Carga (o recarga) el .env sobre os.environ

    Args:
        env_file: Archivo a cargar (por defecto el descubierto)

    Returns:
        Ruta cargada o None si no hay .env
    """
    env_file = env_file or discover_env_file()
    if env_file is None or not env_file.is_file():
        return None
    load_dotenv(env_file, override=True)
    return env_file


class Config:
    """Constantes y rutas compartidas por todo el proceso"""

    ENV_FILE = load_env_file()

    BASE_DIR = ENV_FILE.parent if ENV_FILE else Path.cwd()

    LOG_DIR = Path(os.getenv("LOG_DIR")) if os.getenv("LOG_DIR") else (BASE_DIR / "Logs")
    ENV_EXAMPLE_FILE = BASE_DIR / ".env.example"

    BACKUP_SCHEDULE = os.getenv("BACKUP_SCHEDULE", "02:00")  # Hora diaria del ciclo
    DEFAULT_KEEP_COUNT = 7  # Archivos .zip conservados por carpeta
    DEFAULT_ENGINE = "mysql"

    WILDCARD = "*"
    ARCHIVE_EXTENSION = "zip"
    RAW_EXTENSION = "sql"
    ARCHIVE_PERMISSIONS = 0o644
    CONNECT_TIMEOUT_SECONDS = 10

    LOG_LEVEL = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    LOG_BACKUP_COUNT = 30  # Días de log conservados

    ENV_EXAMPLE = """# Variables de entorno del backup diario
# Copia este archivo como .env y completa con tus datos

# Servidor MySQL/MariaDB
DB_ENGINE=mysql
DB_HOST=127.0.0.1
DB_PORT=3306
DB_USERNAME=backup_user
DB_PASSWORD=tu_password_seguro

# Bases a exportar (* = todas) y bases ignoradas en modo *
DB_EXPORTS=*
DB_FORGETS=information_schema,performance_schema,mysql,sys

# Destino de los archivos .zip
DB_FOLDER=./Backups
DB_BACKUP_FILE_TIME_FORMAT=%Y%m%d%H%M%S
DB_BACKUP_FILE_KEEP_SIZE=7
DB_ARCHIVE_PASSWORD=cambia_esta_clave

# Límite de segundos por volcado (vacío = sin límite)
DB_DUMP_TIMEOUT=

# Hora diaria de ejecución (HH:MM o HH:MM:SS)
BACKUP_SCHEDULE=02:00
"""

