"""
Servicio que empaqueta un volcado en un .zip cifrado con AES-256
"""
import logging
from pathlib import Path
from typing import Optional
import pyzipper
from ..config import Config
from ..exceptions import ArchiveError
from ..logger import LoggerService


class ArchiveService:
    """Escribe el volcado crudo, lo comprime y cifra, y borra el intermedio"""

    def __init__(self, password: str, logger: Optional[logging.Logger] = None):
        """
        Inicializa el servicio de archivado

        Args:
            password: Contraseña de los archivos .zip
            logger: Logger a utilizar (opcional)
        """
        if not password:
            raise ValueError("La contraseña del archivo no puede estar vacía")
        self.password = password.encode("utf-8")
        self.logger = logger or LoggerService.get_logger("ArchiveService")

    def write_archive(self, raw_bytes: bytes, raw_path: Path, archive_path: Path) -> Path:
        """
        Crea un .zip con una sola entrada llamada como el archivo crudo.
        Si archive_path ya existe se sobrescribe.

        Args:
            raw_bytes: Contenido del volcado
            raw_path: Ruta del archivo .sql intermedio
            archive_path: Ruta del .zip final

        Returns:
            Ruta del archivo creado

        Raises:
            ArchiveError: Si falla la escritura del .sql o del .zip
        """
        try:
            raw_path.write_bytes(raw_bytes)
        except OSError as e:
            self._discard(raw_path)
            raise ArchiveError(f"No se pudo escribir {raw_path}: {e}") from e

        try:
            self._zip(raw_path.name, raw_bytes, archive_path)
        except Exception as e:
            self._discard(archive_path)
            self._discard(raw_path)
            raise ArchiveError(f"No se pudo crear {archive_path}: {e}") from e

        try:
            raw_path.unlink()
        except OSError as e:
            self.logger.warning(f"No se pudo eliminar el archivo intermedio {raw_path}: {e}")

        self.logger.info(f"Archivo comprimido: {archive_path}")
        return archive_path

    def _zip(self, entry_name: str, raw_bytes: bytes, archive_path: Path):
        with pyzipper.AESZipFile(archive_path, 'w',
                                 compression=pyzipper.ZIP_DEFLATED,
                                 encryption=pyzipper.WZ_AES) as zf:
            zf.setpassword(self.password)
            zf.setencryption(pyzipper.WZ_AES, nbits=256)
            zf.writestr(entry_name, raw_bytes)
            # El directorio central se escribe al cerrar
            zf.getinfo(entry_name).external_attr = Config.ARCHIVE_PERMISSIONS << 16

    def _discard(self, path: Path):
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            self.logger.warning(f"No se pudo eliminar {path}: {e}")
