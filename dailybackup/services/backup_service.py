"""
Servicio principal que orquesta los ciclos de backup
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Tuple
from ..config import Config
from ..exceptions import (
    ArchiveError,
    BackupFolderError,
    ConfigurationError,
    ConnectivityError,
)
from ..factories.strategy_factory import DumpStrategyFactory
from ..logger import LoggerService
from ..models import BackupTarget, DumpOutcome
from ..repositories.config_repository import ConfigRepository
from ..repositories.database_repository import DatabaseRepository
from ..strategies.base_strategy import DumpStrategy
from .archive_service import ArchiveService
from .cleanup_service import CleanupService
from .selection_policy import select_databases

LOG_OUTPUT_LIMIT = 4096


@dataclass
class CycleContext:
    """Colaboradores de un ciclo, construidos a partir de su BackupTarget"""
    target: BackupTarget
    strategy: DumpStrategy
    archiver: ArchiveService
    cleanup: CleanupService


class BackupService:
    """Servicio principal que orquesta los backups"""

    def __init__(self, config_repo: ConfigRepository,
                 database_repo: Optional[DatabaseRepository] = None,
                 strategy: Optional[DumpStrategy] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Inicializa el servicio de backup

        Args:
            config_repo: Repositorio de configuración
            database_repo: Repositorio que lista las bases del servidor
            strategy: Estrategia de volcado fija (por defecto según DB_ENGINE)
            logger: Logger a utilizar (opcional)
        """
        self.config_repo = config_repo
        self.database_repo = database_repo or DatabaseRepository()
        self.strategy = strategy
        self.logger = logger or LoggerService.get_logger("BackupService")
        self.last_cycle_ok = True

    def run_cycle(self) -> List[DumpOutcome]:
        """
        Ejecuta un ciclo completo: configuración, listado, selección,
        volcados secuenciales y resumen. Nunca lanza por fallos del ciclo.

        Returns:
            Resultados exitosos ordenados por duración ascendente
        """
        self.logger.info("=" * 70)
        self.logger.info("INICIANDO CICLO DE BACKUP")
        self.logger.info("=" * 70)
        self.last_cycle_ok = False

        try:
            target = self.config_repo.load_target()
            context = self._build_context(target)
            server_databases = self.database_repo.list_databases(target)
        except ConfigurationError as e:
            self.logger.error(f"Configuración inválida, ciclo cancelado: {e}")
            return []
        except ConnectivityError as e:
            self.logger.error(f"No se pudieron obtener las bases de datos: {e}")
            return []

        selected = select_databases(server_databases, target.exports, target.forgets)
        if not selected:
            self.logger.warning("No hay bases de datos para respaldar")

        outcomes = []
        for index, database in enumerate(selected):
            try:
                outcome = self._dump_database(context, index, database)
            except BackupFolderError as e:
                self.logger.error(f"Ciclo interrumpido: {e}")
                break
            except Exception as e:
                self.logger.error(f"Error inesperado con {database}: {e}", exc_info=True)
                continue
            if outcome is not None:
                outcomes.append(outcome)

        self.last_cycle_ok = len(outcomes) == len(selected)
        outcomes.sort(key=lambda o: o.duration_us)
        self._print_summary(context, selected, outcomes)
        return outcomes

    def backup_specific_database(self, database_name: str) -> Optional[DumpOutcome]:
        """
        Realiza backup de una base de datos específica

        Args:
            database_name: Nombre de la base de datos

        Returns:
            Resultado del volcado o None si no se pudo respaldar

        Raises:
            ConfigurationError: Si la configuración es inválida
            ConnectivityError: Si no se pudo listar el servidor
        """
        target = self.config_repo.load_target()
        context = self._build_context(target)

        if database_name not in self.database_repo.list_databases(target):
            self.logger.error(f"Base de datos no encontrada en el servidor: {database_name}")
            return None

        try:
            return self._dump_database(context, 0, database_name)
        except BackupFolderError as e:
            self.logger.error(str(e))
            return None

    def get_backup_stats(self) -> Tuple[BackupTarget, dict]:
        """
        Estadísticas de la carpeta de destino configurada

        Returns:
            Tupla (target, estadísticas)
        """
        target = self.config_repo.load_target()
        cleanup = CleanupService(target.keep_count)
        return target, cleanup.get_backup_stats(target.folder)

    def _build_context(self, target: BackupTarget) -> CycleContext:
        strategy = self.strategy or DumpStrategyFactory.create(target.engine)
        return CycleContext(
            target=target,
            strategy=strategy,
            archiver=ArchiveService(target.archive_password),
            cleanup=CleanupService(target.keep_count)
        )

    def _dump_database(self, context: CycleContext, index: int,
                       database: str) -> Optional[DumpOutcome]:
        """
        Volcado, archivado y limpieza de una base. Los fallos del volcado o
        del archivado solo afectan a esta base.

        Args:
            context: Colaboradores del ciclo
            index: Posición en el orden de selección
            database: Nombre de la base

        Returns:
            DumpOutcome si el volcado y el archivado fueron exitosos

        Raises:
            BackupFolderError: Si no se puede crear la carpeta de destino
        """
        target = context.target
        self.logger.info("-" * 70)
        self._ensure_folder(target.folder)

        result = context.strategy.execute_dump(target, database)
        if not result.success:
            self.logger.error(f"Fallo el volcado de {database} (código {result.returncode})")
            self.logger.info(f"STDOUT: {self._decode(result.stdout)}")
            self.logger.info(f"STDERR: {self._decode(result.stderr)}")
            return None

        self.logger.info(f"Volcado exitoso: {database} ({result.duration_us} µs)")

        raw_path, archive_path = self._archive_paths(target, database)
        try:
            context.archiver.write_archive(result.stdout, raw_path, archive_path)
        except ArchiveError as e:
            self.logger.error(f"Fallo el archivado de {database}: {e}")
            return None

        context.cleanup.cleanup_old_archives(target.folder)

        return DumpOutcome(
            index=index,
            database_name=database,
            duration_us=result.duration_us,
            archive_file=archive_path
        )

    def _ensure_folder(self, folder: Path):
        try:
            folder.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise BackupFolderError(f"No se pudo crear la carpeta {folder}: {e}") from e

    @staticmethod
    def _archive_paths(target: BackupTarget, database: str) -> Tuple[Path, Path]:
        """
        Rutas del .sql intermedio y del .zip final. Ambas comparten la
        misma marca de tiempo.
        """
        stem = database
        if target.time_format:
            stem = f"{database}_{datetime.now().strftime(target.time_format)}"
        return (
            target.folder / f"{stem}.{Config.RAW_EXTENSION}",
            target.folder / f"{stem}.{Config.ARCHIVE_EXTENSION}",
        )

    @staticmethod
    def _decode(output: bytes) -> str:
        text = output.decode("utf-8", errors="replace")
        if len(text) > LOG_OUTPUT_LIMIT:
            return f"...{text[-LOG_OUTPUT_LIMIT:]}"
        return text

    def _print_summary(self, context: CycleContext, selected: Sequence[str],
                       outcomes: List[DumpOutcome]):
        """
        Imprime la tabla de resultados del ciclo

        Args:
            context: Colaboradores del ciclo
            selected: Bases seleccionadas
            outcomes: Resultados exitosos ordenados por duración
        """
        failed_count = len(selected) - len(outcomes)
        total_us = sum(o.duration_us for o in outcomes)

        self.logger.info("=" * 70)
        self.logger.info("RESUMEN DEL CICLO DE BACKUP")
        self.logger.info("=" * 70)
        self.logger.info(f"{'Index':>5} | {'Database Name':<30} | Export Duration (microseconds)")
        self.logger.info("-" * 70)
        for outcome in outcomes:
            self.logger.info(
                f"{outcome.index + 1:>5} | {outcome.database_name:<30} | {outcome.duration_us}"
            )
        self.logger.info("-" * 70)
        self.logger.info(f"Bases seleccionadas: {len(selected)}")
        self.logger.info(f"Backups exitosos: {len(outcomes)}")
        self.logger.info(f"Backups fallidos: {failed_count}")
        self.logger.info(f"Tiempo total: {total_us / 1_000_000:.2f}s")

        stats = context.cleanup.get_backup_stats(context.target.folder)
        self.logger.info(f"Archivos almacenados: {stats['total_files']} archivo(s)")
        self.logger.info(f"Espacio utilizado: {stats['total_size_mb']:.2f} MB")
        self.logger.info("=" * 70)

        if failed_count > 0:
            self.logger.warning(
                f"ATENCIÓN: {failed_count} backup(s) fallaron. "
                "Revisa los errores arriba."
            )
