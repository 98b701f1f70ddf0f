"""
Modelos de datos del sistema
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple
from .config import Config


@dataclass(frozen=True)
class BackupTarget:
    """Configuración inmutable de un ciclo de backup"""
    host: str
    port: int
    user: str
    password: str
    folder: Path
    archive_password: str
    exports: Tuple[str, ...] = (Config.WILDCARD,)
    forgets: Tuple[str, ...] = ()
    time_format: Optional[str] = None
    keep_count: int = Config.DEFAULT_KEEP_COUNT
    engine: str = Config.DEFAULT_ENGINE
    dump_timeout: Optional[int] = None  # Segundos; None = sin límite

    def __post_init__(self):
        """Validación después de inicialización"""
        if not self.host:
            raise ValueError("El host del servidor es obligatorio")
        if not 0 < self.port < 65536:
            raise ValueError(f"Puerto fuera de rango: {self.port}")
        if not self.user:
            raise ValueError("El usuario es obligatorio")
        if not self.archive_password:
            raise ValueError("La contraseña de los archivos .zip es obligatoria")
        if self.keep_count < 0:
            raise ValueError("keep_count no puede ser negativo")
        if self.dump_timeout is not None and self.dump_timeout <= 0:
            raise ValueError("dump_timeout debe ser mayor a 0")


@dataclass
class CommandResult:
    """Salida capturada de la herramienta de volcado"""
    returncode: int
    stdout: bytes = b""
    stderr: bytes = b""
    duration_us: int = 0

    @property
    def success(self) -> bool:
        return self.returncode == 0


@dataclass(frozen=True)
class DumpOutcome:
    """Resultado de un volcado exitoso dentro de un ciclo"""
    index: int
    database_name: str
    duration_us: int
    success: bool = True
    archive_file: Optional[Path] = field(default=None, compare=False)

    def __str__(self):
        return f"✓ {self.database_name}: {self.archive_file} ({self.duration_us} µs)"


@dataclass(frozen=True)
class ArchiveFile:
    """Archivo .zip presente en la carpeta de destino"""
    path: Path
    created_at: float
