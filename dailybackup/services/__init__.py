"""
Servicios de la aplicación
"""
from .archive_service import ArchiveService
from .backup_service import BackupService
from .cleanup_service import CleanupService
from .scheduler_service import SchedulerService
from .selection_policy import select_databases

__all__ = [
    'ArchiveService',
    'BackupService',
    'CleanupService',
    'SchedulerService',
    'select_databases'
]
