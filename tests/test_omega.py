import datetime
import unittest
from unittest import mock

import requests

import config
from omega import OmegaFlag, OmegaPoller, parse_flag
from settings import StaticSettings
from shifts import ShiftClock
from timing import Looper

UTC = datetime.timezone.utc
NOVEMBER = datetime.datetime(2024, 11, 12, 20, 0, tzinfo=UTC).timestamp()
DECEMBER = datetime.datetime(2024, 12, 12, 20, 0, tzinfo=UTC).timestamp()


def response(body=b"1", status=200):
    return mock.Mock(status_code=status, content=body)


class FakeTime:
    def __init__(self, wall=NOVEMBER):
        self.wall = wall          # seconds, for the shift clock
        self.mono = 0.0           # seconds, for the looper
        self.now_ms = 1_000_000_000

    def advance_ms(self, n):
        self.mono += n / 1000.0
        self.now_ms += n
        self.wall += n / 1000.0


class TestParseFlag(unittest.TestCase):
    def test_values(self):
        self.assertIs(parse_flag(b"0"), False)
        self.assertIs(parse_flag(b"1"), True)
        self.assertIs(parse_flag(b"1\n"), True)
        self.assertIs(parse_flag(b" 1 "), True)
        self.assertIs(parse_flag(b"\r\n0\r\n"), False)
        self.assertIsNone(parse_flag(b"1 1"))
        self.assertIsNone(parse_flag(b""))
        self.assertIsNone(parse_flag(b"2"))
        self.assertIsNone(parse_flag(b"10"))
        self.assertIsNone(parse_flag(b"<html>1</html>"))


class TestOmegaFlag(unittest.TestCase):
    def test_set_reports_changes(self):
        flag = OmegaFlag()
        self.assertFalse(flag.get())
        self.assertTrue(flag.set(True))
        self.assertFalse(flag.set(True))
        self.assertTrue(flag)
        self.assertTrue(flag.set(False))


class TestOmegaPoller(unittest.TestCase):
    def setUp(self):
        self.time     = FakeTime()
        self.looper   = Looper(clock=lambda: self.time.mono)
        self.settings = StaticSettings({config.PREF_OMEGASHIFT: True})
        self.http     = mock.Mock()
        self.http.get.return_value = response(b"1")
        self.redraw   = mock.Mock()
        self.spawned  = []
        self.poller   = self._poller()

    def _poller(self, spawn=None):
        return OmegaPoller(
            self.looper, self.settings, self.redraw,
            clock=ShiftClock(source=lambda: self.time.wall),
            http=self.http,
            now_ms=lambda: self.time.now_ms,
            spawn=spawn or (lambda fn, *args: fn(*args)),
            interval_ms=600_000, timeout_ms=10_000,
        )

    def test_one_flips_flag_and_requests_redraw(self):
        self.poller.fire()
        self.assertTrue(self.poller.flag.get())
        self.redraw.assert_called_once_with()
        self.http.get.assert_called_once_with(config.OMEGA_CHECK_URL, timeout=10.0)

    def test_unchanged_flag_does_not_redraw(self):
        self.http.get.return_value = response(b"0")
        self.poller.fire()
        self.assertFalse(self.poller.flag.get())
        self.redraw.assert_not_called()

    def test_ineligible_month_clears_flag(self):
        self.poller.fire()
        self.redraw.reset_mock()
        self.http.get.reset_mock()

        self.time.wall = DECEMBER
        self.poller.fire()
        self.assertFalse(self.poller.flag.get())
        self.redraw.assert_called_once_with()
        self.http.get.assert_not_called()

    def test_setting_off_clears_flag(self):
        self.poller.fire()
        self.redraw.reset_mock()

        self.settings.set(config.PREF_OMEGASHIFT, False)
        self.poller.fire()
        self.assertFalse(self.poller.flag.get())
        self.redraw.assert_called_once_with()

    def test_month_is_judged_in_shift_time(self):
        # 05:00 UTC on Dec 1 is still Nov 30 in Los Angeles
        self.time.wall = datetime.datetime(2024, 12, 1, 5, 0, tzinfo=UTC).timestamp()
        self.assertTrue(self.poller.eligible())
        # 03:00 UTC on Nov 1 is still Oct 31 there
        self.time.wall = datetime.datetime(2024, 11, 1, 3, 0, tzinfo=UTC).timestamp()
        self.assertFalse(self.poller.eligible())
        # and the first minute of November counts
        self.time.wall = datetime.datetime(2024, 11, 1, 7, 0, tzinfo=UTC).timestamp()
        self.assertTrue(self.poller.eligible())

    def test_ineligible_and_already_false_does_nothing(self):
        self.time.wall = DECEMBER
        self.poller.fire()
        self.http.get.assert_not_called()
        self.redraw.assert_not_called()

    def test_garbage_payload_is_ignored(self):
        self.poller.flag.set(True)
        self.http.get.return_value = response(b"maybe")
        self.poller.fire()
        self.assertTrue(self.poller.flag.get())
        self.redraw.assert_not_called()

    def test_http_error_is_ignored(self):
        self.http.get.return_value = response(b"1", status=503)
        self.poller.fire()
        self.assertFalse(self.poller.flag.get())
        self.redraw.assert_not_called()

    def test_network_failure_is_ignored(self):
        self.http.get.side_effect = requests.ConnectionError("no network")
        self.poller.fire()
        self.assertFalse(self.poller.flag.get())
        self.redraw.assert_not_called()
        self.assertTrue(self.poller.timer.pending)

    def test_timeout_is_ignored(self):
        self.http.get.side_effect = requests.Timeout("too slow")
        self.poller.fire()
        self.assertFalse(self.poller.flag.get())

    def test_check_finishing_after_timeout_is_discarded(self):
        with mock.patch("omega.time.monotonic", side_effect=[100.0, 111.0]):
            self.poller.fire()
        self.assertFalse(self.poller.flag.get())
        self.redraw.assert_not_called()

    def test_superseded_check_never_updates_flag(self):
        poller = self._poller(spawn=lambda fn, *args: self.spawned.append((fn, args)))
        poller.fire()
        self.assertEqual(len(self.spawned), 1)

        self.settings.set(config.PREF_OMEGASHIFT, False)
        poller.fire()

        fn, args = self.spawned[0]
        fn(*args)
        self.assertFalse(poller.flag.get())
        self.redraw.assert_not_called()

    def test_fire_records_time_and_reschedules(self):
        self.poller.fire()
        self.assertEqual(self.poller.last_check_ms, self.time.now_ms)
        self.assertTrue(self.poller.timer.pending)
        self.assertEqual(self.looper.ms_until_next(), 600_000)

    def test_reschedule_fires_immediately_when_stale(self):
        self.poller.reschedule()
        self.assertEqual(self.looper.ms_until_next(), 0)
        self.assertEqual(self.looper.run_due(), 1)
        self.http.get.assert_called_once()

    def test_reschedule_waits_out_the_interval(self):
        self.poller.fire()
        self.time.advance_ms(100_000)
        self.poller.reschedule()
        self.assertEqual(self.looper.ms_until_next(), 500_000)

    def test_reschedule_never_double_schedules(self):
        self.poller.fire()
        self.time.advance_ms(100_000)
        self.poller.reschedule()
        self.poller.reschedule()
        self.time.advance_ms(500_000)
        self.assertEqual(self.looper.run_due(), 1)
        self.assertEqual(self.http.get.call_count, 2)

    def test_cancel(self):
        self.poller.reschedule()
        self.poller.cancel()
        self.poller.cancel()
        self.assertFalse(self.poller.timer.pending)
        self.assertEqual(self.looper.run_due(), 0)


if __name__ == "__main__":
    unittest.main()
