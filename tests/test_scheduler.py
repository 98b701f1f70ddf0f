"""
Tests para el cálculo de horarios y el SchedulerService
"""
import unittest
from datetime import datetime, time
from unittest import mock

from dailybackup.services.schedule_timing import next_trigger, parse_trigger_time
from dailybackup.services.scheduler_service import SchedulerService


class TestScheduleTiming(unittest.TestCase):
    """Tests para next_trigger y parse_trigger_time"""

    def test_trigger_later_today(self):
        now = datetime(2024, 5, 10, 1, 30)
        self.assertEqual(next_trigger(now, time(2, 0)), datetime(2024, 5, 10, 2, 0))

    def test_midnight_already_passed(self):
        """Test 00:00:00 con hora actual 23:00: se ejecuta al día siguiente"""
        now = datetime(2024, 5, 10, 23, 0)
        self.assertEqual(next_trigger(now, time(0, 0, 0)), datetime(2024, 5, 11, 0, 0, 0))

    def test_exact_instant_moves_to_next_day(self):
        now = datetime(2024, 5, 10, 2, 0, 0)
        self.assertEqual(next_trigger(now, time(2, 0)), datetime(2024, 5, 11, 2, 0))

    def test_month_rollover(self):
        now = datetime(2024, 12, 31, 12, 0)
        self.assertEqual(next_trigger(now, time(3, 15, 30)), datetime(2025, 1, 1, 3, 15, 30))

    def test_parse_trigger_time(self):
        self.assertEqual(parse_trigger_time("02:00"), time(2, 0))
        self.assertEqual(parse_trigger_time("23:59:59"), time(23, 59, 59))

    def test_parse_trigger_time_invalid(self):
        """Test validación de formato de hora"""
        for value in ("25:00", "12", "aa:bb", "12:60", "", "01:02:03:04"):
            with self.assertRaises(ValueError, msg=value):
                parse_trigger_time(value)


class TestSchedulerService(unittest.TestCase):
    """Tests para SchedulerService"""

    def setUp(self):
        self.backup_service = mock.Mock()
        self.backup_service.run_cycle.return_value = []
        self.service = SchedulerService(self.backup_service, trigger="00:00:00")

    def test_invalid_trigger(self):
        with self.assertRaises(ValueError):
            SchedulerService(self.backup_service, trigger="24:00")

    def test_cycle_error_does_not_stop_scheduler(self):
        """Test que un error en el ciclo queda registrado y no se propaga"""
        self.backup_service.run_cycle.side_effect = RuntimeError("boom")
        self.service._run_cycle_job()
        self.backup_service.run_cycle.assert_called_once()

    @mock.patch("dailybackup.services.scheduler_service.time.sleep")
    def test_run_pending_sleeps_until_next_run(self, sleep):
        self.service.scheduler = mock.Mock(idle_seconds=42.5)
        self.service.run_pending()
        sleep.assert_called_once_with(42.5)
        self.service.scheduler.run_pending.assert_called_once()

    @mock.patch("dailybackup.services.scheduler_service.time.sleep")
    def test_run_pending_without_wait(self, sleep):
        self.service.scheduler = mock.Mock(idle_seconds=-1)
        self.service.run_pending()
        sleep.assert_not_called()
        self.service.scheduler.run_pending.assert_called_once()

    def test_start_registers_daily_job(self):
        """Test registro del trabajo diario y ejecución inicial"""
        def stop():
            self.service.running = False

        with mock.patch.object(self.service, "run_pending", side_effect=stop):
            self.service.start(run_immediately=True)

        self.assertEqual(len(self.service.scheduler.jobs), 1)
        job = self.service.scheduler.jobs[0]
        self.assertEqual(job.at_time, time(0, 0, 0))
        self.backup_service.run_cycle.assert_called_once()

    def test_get_next_run_format(self):
        next_run = self.service.get_next_run()
        self.assertTrue(next_run.endswith("00:00:00"))


if __name__ == '__main__':
    unittest.main()
