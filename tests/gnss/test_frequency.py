#!/usr/bin/env python3
"""Tests for carrier frequency lookup"""

import unittest

from pyb2b.core.constants import (CODE_L1C, CODE_L2C, CODE_L2I, CODE_L5Q,
                                  CODE_L6I, CODE_L7I, CODE_NONE, DFREQ_G1,
                                  FREQ_B1I, FREQ_B2b, FREQ_B3, FREQ_G1, FREQ_L1,
                                  FREQ_L5, SYS_BDS, SYS_GLO, SYS_GPS, SYS_NONE,
                                  prn2sat)
from pyb2b.gnss.frequency import code2freq, sat2freq


class TestCode2Freq(unittest.TestCase):

    def test_gps(self):
        self.assertEqual(code2freq(SYS_GPS, CODE_L1C), FREQ_L1)
        self.assertEqual(code2freq(SYS_GPS, CODE_L5Q), FREQ_L5)

    def test_beidou_bands(self):
        self.assertEqual(code2freq(SYS_BDS, CODE_L2I), FREQ_B1I)
        self.assertEqual(code2freq(SYS_BDS, CODE_L7I), FREQ_B2b)
        self.assertEqual(code2freq(SYS_BDS, CODE_L6I), FREQ_B3)

    def test_glonass_fdma(self):
        self.assertEqual(code2freq(SYS_GLO, CODE_L1C, glo_fcn=-3), FREQ_G1 - 3 * DFREQ_G1)
        self.assertNotEqual(code2freq(SYS_GLO, CODE_L2C, 1), 0.0)

    def test_unknown(self):
        self.assertEqual(code2freq(SYS_GPS, CODE_NONE), 0.0)
        self.assertEqual(code2freq(SYS_NONE, CODE_L1C), 0.0)
        self.assertEqual(code2freq(SYS_GPS, CODE_L6I), 0.0)

    def test_sat2freq(self):
        self.assertEqual(sat2freq(prn2sat(23, SYS_BDS), CODE_L2I), FREQ_B1I)


if __name__ == '__main__':
    unittest.main()
