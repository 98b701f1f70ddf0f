"""
Tests del ciclo de backup completo
"""
import re
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import pyzipper

from dailybackup.exceptions import ArchiveError, ConnectivityError
from dailybackup.models import CommandResult
from dailybackup.repositories.config_repository import ConfigRepository
from dailybackup.services.archive_service import ArchiveService
from dailybackup.services.backup_service import BackupService
from dailybackup.strategies.base_strategy import DumpStrategy


class FakeDumpStrategy(DumpStrategy):
    """Simula mysqldump: falla para las bases indicadas"""

    tool = "mysqldump"

    def __init__(self, failing=(), durations=None):
        super().__init__()
        self.failing = set(failing)
        self.durations = durations or {}
        self.calls = []

    def build_command(self, target, database):
        return [self.tool, database]

    def execute_dump(self, target, database):
        self.calls.append(database)
        duration = self.durations.get(database, 100)
        if database in self.failing:
            return CommandResult(returncode=2, stdout=b"", stderr=b"Access denied",
                                 duration_us=duration)
        return CommandResult(returncode=0, stdout=f"-- dump {database}".encode(),
                             duration_us=duration)


class TestBackupService(unittest.TestCase):
    """Tests para BackupService.run_cycle"""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.folder = self.temp_dir / "backups" / "mysql"
        self.env = {
            "DB_HOST": "db.local",
            "DB_PORT": "3306",
            "DB_USERNAME": "backup",
            "DB_PASSWORD": "secret",
            "DB_FOLDER": str(self.folder),
            "DB_ARCHIVE_PASSWORD": "zip-pass",
            "DB_FORGETS": "sys",
        }
        self.database_repo = mock.Mock()
        self.database_repo.list_databases.return_value = ["app", "sys", "logs"]

    def tearDown(self):
        if self.temp_dir.exists():
            shutil.rmtree(self.temp_dir)

    def _service(self, strategy):
        return BackupService(
            ConfigRepository(environ=self.env),
            database_repo=self.database_repo,
            strategy=strategy
        )

    def _archives(self):
        return sorted(p.name for p in self.folder.glob("*.zip"))

    def test_wildcard_cycle(self):
        """Test ciclo con * y forgets: crea carpeta y un .zip por base"""
        strategy = FakeDumpStrategy()
        outcomes = self._service(strategy).run_cycle()

        self.assertEqual(strategy.calls, ["app", "logs"])
        self.assertEqual([o.database_name for o in outcomes], ["app", "logs"])
        self.assertEqual(self._archives(), ["app.zip", "logs.zip"])
        self.assertEqual(list(self.folder.glob("*.sql")), [])

        with pyzipper.AESZipFile(self.folder / "app.zip") as zf:
            zf.setpassword(b"zip-pass")
            self.assertEqual(zf.read("app.sql"), b"-- dump app")

    def test_failed_dump_is_isolated(self):
        """Test que un volcado fallido no afecta al resto"""
        self.database_repo.list_databases.return_value = ["a", "b", "c"]
        self.env["DB_FORGETS"] = ""
        service = self._service(FakeDumpStrategy(failing={"b"}))

        outcomes = service.run_cycle()

        self.assertEqual(len(outcomes), 2)
        self.assertNotIn("b", [o.database_name for o in outcomes])
        self.assertEqual(self._archives(), ["a.zip", "c.zip"])
        self.assertFalse(service.last_cycle_ok)

    def test_archive_failure_is_isolated(self):
        """Test que un fallo de escritura solo afecta a su base"""
        original = ArchiveService.write_archive

        def failing_write(archiver, raw_bytes, raw_path, archive_path):
            if raw_path.stem == "app":
                raise ArchiveError("disk full")
            return original(archiver, raw_bytes, raw_path, archive_path)

        with mock.patch.object(ArchiveService, "write_archive", autospec=True,
                               side_effect=failing_write):
            outcomes = self._service(FakeDumpStrategy()).run_cycle()

        self.assertEqual([o.database_name for o in outcomes], ["logs"])
        self.assertEqual(self._archives(), ["logs.zip"])

    def test_unexpected_zip_error_is_isolated(self):
        """Test que un error no previsto al comprimir no corta el ciclo"""
        original = ArchiveService._zip

        def failing_zip(archiver, entry_name, raw_bytes, archive_path):
            if entry_name == "app.sql":
                archive_path.write_bytes(b"PK")
                raise TypeError("unexpected")
            return original(archiver, entry_name, raw_bytes, archive_path)

        with mock.patch.object(ArchiveService, "_zip", autospec=True,
                               side_effect=failing_zip):
            outcomes = self._service(FakeDumpStrategy()).run_cycle()

        self.assertEqual([o.database_name for o in outcomes], ["logs"])
        self.assertEqual(self._archives(), ["logs.zip"])
        self.assertFalse((self.folder / "app.sql").exists())

    def test_unexpected_dump_error_is_isolated(self):
        strategy = FakeDumpStrategy()
        original = strategy.execute_dump

        def exploding_dump(target, database):
            if database == "app":
                raise RuntimeError("boom")
            return original(target, database)

        strategy.execute_dump = exploding_dump
        service = self._service(strategy)
        outcomes = service.run_cycle()

        self.assertEqual([o.database_name for o in outcomes], ["logs"])
        self.assertFalse(service.last_cycle_ok)

    def test_outcomes_sorted_by_duration(self):
        """Test orden de resultados por duración ascendente"""
        self.database_repo.list_databases.return_value = ["a", "b", "c"]
        self.env["DB_FORGETS"] = ""
        strategy = FakeDumpStrategy(durations={"a": 300, "b": 100, "c": 200})

        outcomes = self._service(strategy).run_cycle()

        self.assertEqual(strategy.calls, ["a", "b", "c"])
        self.assertEqual([o.database_name for o in outcomes], ["b", "c", "a"])
        self.assertEqual([o.index for o in outcomes], [1, 2, 0])

    def test_explicit_exports(self):
        self.env["DB_EXPORTS"] = "logs,reports,app"
        strategy = FakeDumpStrategy()
        self._service(strategy).run_cycle()
        self.assertEqual(strategy.calls, ["logs", "app"])

    def test_empty_selection(self):
        """Test selección vacía: ciclo completo sin volcados"""
        self.env["DB_EXPORTS"] = "reports"
        strategy = FakeDumpStrategy()
        service = self._service(strategy)

        self.assertEqual(service.run_cycle(), [])
        self.assertEqual(strategy.calls, [])
        self.assertTrue(service.last_cycle_ok)

    def test_timestamped_names(self):
        self.env["DB_BACKUP_FILE_TIME_FORMAT"] = "%Y%m%d%H%M%S"
        self._service(FakeDumpStrategy()).run_cycle()

        archives = self._archives()
        self.assertEqual(len(archives), 2)
        match = re.fullmatch(r"app_(\d{14})\.zip", archives[0])
        self.assertIsNotNone(match)
        with pyzipper.AESZipFile(self.folder / archives[0]) as zf:
            self.assertEqual(zf.namelist(), [f"app_{match.group(1)}.sql"])

    def test_retention_applied_after_each_archive(self):
        self.env["DB_BACKUP_FILE_KEEP_SIZE"] = "1"
        self._service(FakeDumpStrategy()).run_cycle()
        self.assertEqual(len(self._archives()), 1)

    def test_configuration_error_aborts_cycle(self):
        """Test que una configuración inválida cancela solo el ciclo"""
        del self.env["DB_HOST"]
        strategy = FakeDumpStrategy()
        service = self._service(strategy)

        self.assertEqual(service.run_cycle(), [])
        self.assertEqual(strategy.calls, [])
        self.assertFalse(service.last_cycle_ok)
        self.database_repo.list_databases.assert_not_called()

    def test_connectivity_error_aborts_cycle(self):
        self.database_repo.list_databases.side_effect = ConnectivityError("refused")
        strategy = FakeDumpStrategy()

        self.assertEqual(self._service(strategy).run_cycle(), [])
        self.assertEqual(strategy.calls, [])

    def test_unsupported_engine(self):
        self.env["DB_ENGINE"] = "oracle"
        service = BackupService(ConfigRepository(environ=self.env),
                                database_repo=self.database_repo)
        self.assertEqual(service.run_cycle(), [])

    def test_folder_error_aborts_remaining_dumps(self):
        """Test carpeta de destino imposible de crear"""
        blocker = self.temp_dir / "blocker"
        blocker.write_text("file, not a folder")
        self.env["DB_FOLDER"] = str(blocker / "mysql")
        strategy = FakeDumpStrategy()

        self.assertEqual(self._service(strategy).run_cycle(), [])
        self.assertEqual(strategy.calls, [])

    def test_backup_specific_database(self):
        outcome = self._service(FakeDumpStrategy()).backup_specific_database("sys")
        self.assertIsNotNone(outcome)
        self.assertEqual(outcome.database_name, "sys")
        self.assertEqual(self._archives(), ["sys.zip"])

    def test_backup_specific_database_not_on_server(self):
        strategy = FakeDumpStrategy()
        self.assertIsNone(self._service(strategy).backup_specific_database("reports"))
        self.assertEqual(strategy.calls, [])

    def test_get_backup_stats(self):
        service = self._service(FakeDumpStrategy())
        service.run_cycle()
        target, stats = service.get_backup_stats()
        self.assertEqual(target.folder, self.folder)
        self.assertEqual(stats['total_files'], 2)


if __name__ == '__main__':
    unittest.main()
