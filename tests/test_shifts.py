import datetime
import unittest
from zoneinfo import ZoneInfo

import config
from settings import StaticSettings
from shifts import DRAWABLE_SHIFTS, Shift, ShiftClock, classify

LA = ZoneInfo("America/Los_Angeles")


def at_hour(hour, tz=LA):
    return datetime.datetime(2024, 3, 5, hour, 30, tzinfo=tz)


class TestClassify(unittest.TestCase):
    def test_buckets_without_bee_shed(self):
        settings = StaticSettings()
        expected = {range(0, 6): Shift.ZETASHIFT,
                    range(6, 12): Shift.DAWNGUARD,
                    range(12, 18): Shift.ALPHAFLIGHT,
                    range(18, 24): Shift.NIGHTWATCH}
        for hours, shift in expected.items():
            for h in hours:
                self.assertIs(classify(at_hour(h), settings, False), shift, h)

    def test_buckets_with_bee_shed(self):
        settings = StaticSettings({config.PREF_BEESHED: True})
        expected = {range(0, 6): Shift.ZETASHIFT,
                    range(6, 12): Shift.DAWNGUARD,
                    range(12, 18): Shift.BETAFLIGHT,
                    range(18, 24): Shift.DUSKGUARD}
        for hours, shift in expected.items():
            for h in hours:
                self.assertIs(classify(at_hour(h), settings, False), shift, h)

    def test_bucket_edges(self):
        settings = StaticSettings()
        edge = datetime.datetime(2024, 3, 5, 5, 59, 59, 999999, tzinfo=LA)
        self.assertIs(classify(edge, settings, False), Shift.ZETASHIFT)
        self.assertIs(classify(edge + datetime.timedelta(microseconds=1),
                               settings, False), Shift.DAWNGUARD)

    def test_omega_overrides_every_hour_and_skin(self):
        for bee_shed in (False, True):
            settings = StaticSettings({config.PREF_OMEGASHIFT: True,
                                       config.PREF_BEESHED: bee_shed})
            for h in range(24):
                self.assertIs(classify(at_hour(h), settings, True), Shift.OMEGASHIFT)

    def test_omega_flag_ignored_when_not_allowed(self):
        settings = StaticSettings({config.PREF_OMEGASHIFT: False})
        self.assertIs(classify(at_hour(13), settings, True), Shift.ALPHAFLIGHT)

    def test_never_invalid(self):
        settings = StaticSettings()
        for h in range(24):
            self.assertIn(classify(at_hour(h), settings, False), DRAWABLE_SHIFTS)


class TestShiftClock(unittest.TestCase):
    # 2024-03-05 20:00 UTC is noon in Los Angeles
    TS = datetime.datetime(2024, 3, 5, 20, 0, tzinfo=datetime.timezone.utc).timestamp()

    def test_pinned_to_moonbase_time(self):
        clock = ShiftClock(source=lambda: self.TS)
        now = clock.now(StaticSettings({config.PREF_TIMEZONE: True}))
        self.assertEqual(now.hour, 12)
        self.assertEqual(now.utcoffset(), datetime.timedelta(hours=-8))

    def test_local_time_when_timezone_off(self):
        clock = ShiftClock(source=lambda: self.TS)
        now = clock.now(StaticSettings({config.PREF_TIMEZONE: False}))
        expected = datetime.datetime.fromtimestamp(self.TS).astimezone()
        self.assertEqual(now, expected)
        self.assertIsNotNone(now.tzinfo)

    def test_unknown_zone_falls_back_to_utc(self):
        clock = ShiftClock(tz_name="Moonbase/Nowhere", source=lambda: self.TS)
        now = clock.now(StaticSettings())
        self.assertEqual(now.hour, 20)


if __name__ == "__main__":
    unittest.main()
