"""
Servicio para limpiar archivos antiguos (Single Responsibility)
"""
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional
from ..config import Config
from ..logger import LoggerService
from ..models import ArchiveFile


def _creation_time(path: Path) -> float:
    """
    Fecha de creación del archivo. Usa st_birthtime si la plataforma lo
    expone y st_ctime en caso contrario; sin metadatos devuelve 0.
    """
    try:
        stat = os.stat(path)
    except OSError:
        return 0.0
    return getattr(stat, "st_birthtime", None) or stat.st_ctime


class CleanupService:
    """Conserva solo los keep_count archivos .zip más recientes de una carpeta"""

    def __init__(self, keep_count: int, logger: Optional[logging.Logger] = None):
        """
        Inicializa el servicio de limpieza

        Args:
            keep_count: Cantidad máxima de archivos a conservar
            logger: Logger a utilizar (opcional)
        """
        if keep_count < 0:
            raise ValueError("keep_count no puede ser negativo")
        self.keep_count = keep_count
        self.logger = logger or LoggerService.get_logger("CleanupService")

    def list_archives(self, folder: Path) -> List[ArchiveFile]:
        """
        Lista los .zip de la carpeta (no recursivo), del más antiguo al más nuevo

        Args:
            folder: Carpeta de destino

        Returns:
            Archivos ordenados por fecha de creación ascendente
        """
        suffix = f".{Config.ARCHIVE_EXTENSION}"
        paths = sorted(p for p in folder.iterdir() if p.suffix == suffix and p.is_file())
        archives = [ArchiveFile(path=p, created_at=_creation_time(p)) for p in paths]
        archives.sort(key=lambda a: a.created_at)
        return archives

    def cleanup_old_archives(self, folder: Path) -> int:
        """
        Elimina los archivos más antiguos hasta dejar keep_count.
        La carpeta se vuelve a listar en cada llamada.

        Args:
            folder: Carpeta de destino

        Returns:
            Cantidad de archivos eliminados
        """
        if not folder.is_dir():
            self.logger.info(f"El directorio no existe: {folder}")
            return 0

        try:
            archives = self.list_archives(folder)
        except OSError as e:
            self.logger.warning(f"No se pudo listar {folder}: {e}")
            return 0

        excess = len(archives) - self.keep_count
        if excess <= 0:
            return 0

        deleted_count = 0
        for archive in archives[:excess]:
            self.logger.info(f"Eliminando archivo antiguo: {archive.path.name}")
            try:
                archive.path.unlink()
                deleted_count += 1
            except OSError as e:
                self.logger.warning(f"Error al eliminar {archive.path.name}: {e}")

        self.logger.info(
            f"Limpieza completada: {deleted_count} archivo(s) eliminado(s), "
            f"se conservan {self.keep_count}"
        )
        return deleted_count

    def get_backup_stats(self, folder: Path) -> dict:
        """
        Obtiene estadísticas de los archivos .zip

        Args:
            folder: Carpeta de destino

        Returns:
            Diccionario con estadísticas
        """
        stats = {
            'total_files': 0,
            'total_size_mb': 0,
            'oldest_backup': None,
            'newest_backup': None
        }
        if not folder.is_dir():
            return stats

        try:
            archives = self.list_archives(folder)
            if not archives:
                return stats

            total_size = sum(a.path.stat().st_size for a in archives)
            stats.update({
                'total_files': len(archives),
                'total_size_mb': total_size / (1024 * 1024),
                'oldest_backup': datetime.fromtimestamp(archives[0].created_at),
                'newest_backup': datetime.fromtimestamp(archives[-1].created_at)
            })
        except OSError as e:
            self.logger.error(f"Error obteniendo estadísticas: {e}")
        return stats
