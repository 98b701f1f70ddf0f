"""
Jerarquía de errores del sistema de backup
"""


class BackupError(Exception):
    """Error base del sistema de backup"""


class ConfigurationError(BackupError):
    """Falta un valor obligatorio o tiene un formato inválido"""


class ConnectivityError(BackupError):
    """No se pudo listar las bases de datos del servidor"""


class BackupFolderError(BackupError):
    """No se pudo crear la carpeta de destino"""


class ArchiveError(BackupError):
    """Fallo al escribir el archivo .zip de una base de datos"""
