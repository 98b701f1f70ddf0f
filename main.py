#!/usr/bin/env python3
"""
Backup diario de bases de datos MySQL/MariaDB
Punto de entrada principal

Uso:
    python main.py                  # Modo scheduler (automático)
    python main.py once             # Ejecutar un ciclo una vez
    python main.py --db nombre_db   # Backup de una BD específica
    python main.py --help           # Ayuda
"""
import argparse
import sys

from dailybackup.config import Config
from dailybackup.exceptions import BackupError
from dailybackup.logger import LoggerService
from dailybackup.repositories.config_repository import ConfigRepository
from dailybackup.services.backup_service import BackupService
from dailybackup.services.scheduler_service import SchedulerService


def parse_arguments(argv=None):
    """
    Parsea argumentos de línea de comandos

    Returns:
        Namespace con los argumentos parseados
    """
    parser = argparse.ArgumentParser(
        description='Backup diario de bases de datos MySQL/MariaDB',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Ejemplos:
  python main.py                    # Iniciar servicio automático
  python main.py once               # Ejecutar un ciclo una sola vez
  python main.py --db mi_db         # Backup de una base específica
  python main.py --stats            # Ver estadísticas de la carpeta destino
  python main.py --init             # Crear .env.example
        """
    )

    parser.add_argument(
        'mode',
        nargs='?',
        choices=['once', 'scheduler'],
        default='scheduler',
        help='Modo de ejecución (default: scheduler)'
    )

    parser.add_argument(
        '--db',
        type=str,
        metavar='NOMBRE',
        help='Realizar backup de una base de datos específica'
    )

    parser.add_argument(
        '--stats',
        action='store_true',
        help='Mostrar estadísticas de backups'
    )

    parser.add_argument(
        '--init',
        action='store_true',
        help='Crear archivo .env.example'
    )

    parser.add_argument(
        '--now',
        action='store_true',
        help='Ejecutar un ciclo inmediatamente al iniciar scheduler'
    )

    return parser.parse_args(argv)


def initialize_config(config_repo: ConfigRepository) -> bool:
    """
    Crea .env.example si no existe

    Returns:
        True si se creó el archivo
    """
    logger = LoggerService.get_logger("Init")

    if Config.ENV_EXAMPLE_FILE.exists():
        logger.info(f"Ya existe: {Config.ENV_EXAMPLE_FILE}")
        return False

    if not config_repo.create_example_env():
        return False

    logger.info("=" * 70)
    logger.info("IMPORTANTE:")
    logger.info("1. Copia .env.example como .env")
    logger.info("2. Edita .env con el servidor, credenciales y contraseña de los .zip")
    logger.info("3. Ejecuta nuevamente este script")
    logger.info("=" * 70)
    return True


def show_statistics(backup_service: BackupService):
    """
    Muestra estadísticas de la carpeta de destino

    Args:
        backup_service: Servicio de backup
    """
    logger = LoggerService.get_logger("Stats")
    target, stats = backup_service.get_backup_stats()

    logger.info("=" * 70)
    logger.info("ESTADÍSTICAS DE BACKUPS")
    logger.info("=" * 70)
    logger.info(f"Directorio: {target.folder}")
    logger.info(f"Total de archivos: {stats['total_files']}")
    logger.info(f"Espacio utilizado: {stats['total_size_mb']:.2f} MB")

    if stats['oldest_backup']:
        logger.info(f"Backup más antiguo: {stats['oldest_backup']}")
    if stats['newest_backup']:
        logger.info(f"Backup más reciente: {stats['newest_backup']}")

    logger.info(f"Archivos conservados por carpeta: {target.keep_count}")
    logger.info("=" * 70)


def main(argv=None) -> int:
    """Función principal"""
    args = parse_arguments(argv)
    LoggerService.configure()
    config_repo = ConfigRepository()

    if args.init:
        initialize_config(config_repo)
        return 0

    backup_service = BackupService(config_repo)
    logger = LoggerService.get_logger("Main")

    if args.stats:
        show_statistics(backup_service)
        return 0

    if args.db:
        logger.info(f"Realizando backup de: {args.db}")
        outcome = backup_service.backup_specific_database(args.db)
        if outcome is None:
            logger.error(f"✗ Backup fallido: {args.db}")
            return 1
        logger.info(f"✓ Backup exitoso: {outcome.archive_file}")
        return 0

    if args.mode == 'once':
        logger.info("Modo: Ejecución única")
        backup_service.run_cycle()
        return 0 if backup_service.last_cycle_ok else 1

    scheduler = SchedulerService(backup_service)
    scheduler.start(run_immediately=args.now)
    return 0


def run():
    """Entrada del script de consola"""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nPrograma interrumpido por el usuario")
        sys.exit(0)
    except (BackupError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)
    except Exception as e:
        print(f"Error crítico: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    run()
