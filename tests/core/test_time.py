#!/usr/bin/env python3
"""Tests for GPS/BDT time handling"""

import unittest

from pyb2b.core.constants import GPS_BDS_OFFSET, WEEK_SECONDS
from pyb2b.core.time import (adjweek, bdt2gpst, bdt2time, epoch2time,
                             gpst2bdt, gpst2time, time2epoch, time2gpst,
                             timeadd, timediff)


class TestTimeConversions(unittest.TestCase):

    def test_gps_epoch(self):
        self.assertEqual(epoch2time([1980, 1, 6, 0, 0, 0]), 0.0)

    def test_epoch_round_trip(self):
        ep = [2023, 5, 17, 12, 30, 15.25]
        t = epoch2time(ep)
        self.assertEqual(time2epoch(t)[:5], ep[:5])
        self.assertAlmostEqual(time2epoch(t)[5], 15.25)

    def test_gpst_week(self):
        t = gpst2time(2262, 345600.5)
        week, tow = time2gpst(t)
        self.assertEqual(week, 2262)
        self.assertAlmostEqual(tow, 345600.5)

    def test_bdt_week_offset(self):
        # BDT week 0 starts 2006-01-01, GPS week 1356
        self.assertEqual(bdt2time(0, 0.0), epoch2time([2006, 1, 1, 0, 0, 0]))
        self.assertEqual(time2gpst(bdt2time(950, 100.0)), (2306, 100.0))

    def test_bdt_gpst_shift(self):
        t = bdt2time(950, 345600)
        self.assertEqual(bdt2gpst(t) - t, GPS_BDS_OFFSET)
        self.assertEqual(gpst2bdt(bdt2gpst(t)), t)

    def test_timeadd_timediff(self):
        t = gpst2time(2262, 0.0)
        self.assertEqual(timediff(timeadd(t, 12.5), t), 12.5)


class TestAdjweek(unittest.TestCase):
    """adjweek moves a time within half a week of the reference"""

    def setUp(self):
        self.t0 = gpst2time(2262, 10.0)

    def test_previous_week(self):
        t = self.t0 + WEEK_SECONDS - 100.0
        self.assertEqual(adjweek(t, self.t0), t - WEEK_SECONDS)

    def test_next_week(self):
        t = self.t0 - WEEK_SECONDS + 100.0
        self.assertEqual(adjweek(t, self.t0), t + WEEK_SECONDS)

    def test_within_half_week(self):
        for dt in (-302399.0, 0.0, 302399.0):
            t = self.t0 + dt
            self.assertEqual(adjweek(t, self.t0), t)
            self.assertLessEqual(abs(adjweek(t, self.t0) - self.t0), WEEK_SECONDS / 2)


if __name__ == '__main__':
    unittest.main()
