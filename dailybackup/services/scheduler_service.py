"""
Servicio de programación del ciclo diario de backup
"""
import logging
import time
from datetime import datetime
from typing import Optional
import schedule
from ..config import Config
from ..logger import LoggerService
from .backup_service import BackupService
from .schedule_timing import next_trigger, parse_trigger_time


class SchedulerService:
    """Ejecuta un ciclo de backup cada día a la hora configurada"""

    def __init__(self, backup_service: BackupService, trigger: Optional[str] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Inicializa el servicio de programación

        Args:
            backup_service: Servicio de backup a ejecutar
            trigger: Hora diaria HH:MM[:SS] (por defecto Config.BACKUP_SCHEDULE)
            logger: Logger a utilizar (opcional)

        Raises:
            ValueError: Si la hora no tiene un formato válido
        """
        self.backup_service = backup_service
        self.trigger_time = parse_trigger_time(trigger or Config.BACKUP_SCHEDULE)
        self.logger = logger or LoggerService.get_logger("SchedulerService")
        self.scheduler = schedule.Scheduler()
        self.running = False

    def start(self, run_immediately: bool = False):
        """
        Inicia el bucle de espera y ejecución. No termina salvo que el
        proceso sea detenido.

        Args:
            run_immediately: Si es True, ejecuta un ciclo antes de esperar
        """
        self.scheduler.every().day.at(self.trigger_time.strftime("%H:%M:%S")).do(self._run_cycle_job)

        self.logger.info("=" * 70)
        self.logger.info("SERVICIO DE BACKUP AUTOMÁTICO INICIADO")
        self.logger.info("=" * 70)
        self.logger.info(f"Ciclo diario programado a las {self.trigger_time.strftime('%H:%M:%S')}")
        self.logger.info(f"Próxima ejecución: {self.get_next_run()}")
        self.logger.info("=" * 70)

        if run_immediately:
            self.logger.info("Ejecutando backup inicial...")
            self._run_cycle_job()

        self.running = True
        while self.running:
            self.run_pending()

    def run_pending(self):
        """Espera hasta la próxima ejecución y la lanza"""
        idle = self.scheduler.idle_seconds
        if idle is not None and idle > 0:
            time.sleep(idle)
        self.scheduler.run_pending()

    def _run_cycle_job(self):
        """Ejecuta un ciclo; cualquier error queda en el log"""
        try:
            self.logger.info(f"Ejecutando backup programado a las {time.strftime('%Y-%m-%d %H:%M:%S')}")
            outcomes = self.backup_service.run_cycle()
            self.logger.info(f"Ciclo completado: {len(outcomes)} backup(s) exitoso(s)")
        except Exception as e:
            self.logger.error(f"Error crítico durante backup: {e}", exc_info=True)
        self.logger.info(f"Próxima ejecución: {self.get_next_run()}")

    def get_next_run(self) -> str:
        """
        Obtiene la fecha de la próxima ejecución

        Returns:
            String con la fecha y hora de la próxima ejecución
        """
        return next_trigger(datetime.now(), self.trigger_time).strftime('%Y-%m-%d %H:%M:%S')
