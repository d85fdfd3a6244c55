#!/usr/bin/env python3
"""Tests for RINEX-4 ephemeris field decoding"""

import unittest

from pyb2b.core.constants import SYS_BDS, SYS_GAL, SYS_GLO, SYS_GPS, prn2sat
from pyb2b.core.data_structures import NavFormat
from pyb2b.core.time import bdt2gpst, bdt2time, gpst2time
from pyb2b.satellite.ephemeris import (NFIELDS, URA_EPH, decode_ephemeris,
                                       encode_ephemeris, ura_value, uraindex,
                                       var_uraeph)


def legacy_fields(week, toes, iode=10, tgd=(-5.0e-9, 2.0e-9), ura=2.0):
    data = [0.0] * NFIELDS[NavFormat.LEGACY]
    data[0:3] = [1.0e-4, 2.0e-11, 0.0]
    data[3] = iode
    data[4:11] = [-20.0, 4.5e-9, 0.7, 1.0e-6, 0.01, 8.0e-6, 5153.7]
    data[11:20] = [toes, 1.0e-7, -2.0, -1.0e-7, 0.96, 250.0, 0.8, -8.0e-9, 1.0e-10]
    data[21] = week
    data[23] = ura
    data[25:27] = tgd
    data[27] = toes - 30.0
    return data


class TestUra(unittest.TestCase):

    def test_uraindex(self):
        self.assertEqual(uraindex(2.0), 0)
        self.assertEqual(uraindex(2.4), 0)
        self.assertEqual(uraindex(3.0), 1)
        self.assertEqual(uraindex(1.0e6), 15)

    def test_ura_value(self):
        self.assertEqual(ura_value(1), URA_EPH[1])
        self.assertEqual(ura_value(-1), 0.0)
        self.assertEqual(ura_value(16), 0.0)

    def test_var_uraeph(self):
        self.assertEqual(var_uraeph(0), 2.4 ** 2)
        self.assertEqual(var_uraeph(15), 6144.0 ** 2)
        self.assertEqual(var_uraeph(-1), 6144.0 ** 2)


class TestDecodeLegacy(unittest.TestCase):

    def test_gps_lnav(self):
        sat = prn2sat(5, SYS_GPS)
        toc = gpst2time(2262, 345600.0)
        data = legacy_fields(2262, 345600.0)
        data[20], data[22], data[26], data[28] = 1.0, 0.0, 20.0, 4.0
        eph = decode_ephemeris(sat, toc, data, NavFormat.LEGACY)

        self.assertEqual(eph.toc, toc)
        self.assertEqual(eph.toe, toc)
        self.assertEqual(eph.ttr, toc - 30.0)
        self.assertAlmostEqual(eph.A, 5153.7 ** 2)
        self.assertEqual(eph.iode, 10)
        self.assertEqual(eph.iodc, 20)
        self.assertEqual(eph.tgd, (-5.0e-9,))
        self.assertEqual(eph.sva, 0)
        self.assertEqual(eph.fit, 4.0)

    def test_bds_d1_in_bdt(self):
        sat = prn2sat(23, SYS_BDS)
        toc = bdt2time(950, 345600.0)
        data = legacy_fields(950, 345600.0)
        data[28] = 21.0
        eph = decode_ephemeris(sat, toc, data, NavFormat.LEGACY)

        self.assertEqual(eph.toc, bdt2gpst(toc))
        self.assertEqual(eph.toe, bdt2gpst(toc))
        self.assertEqual(eph.toes, 345600.0)
        self.assertEqual(eph.iodc, 21)
        self.assertEqual(eph.tgd, (-5.0e-9, 2.0e-9))

    def test_galileo_iodnav(self):
        sat = prn2sat(11, SYS_GAL)
        toc = gpst2time(2262, 345600.0)
        eph = decode_ephemeris(sat, toc, legacy_fields(2262, 345600.0), NavFormat.LEGACY)
        self.assertEqual(eph.iodc, eph.iode)

    def test_week_rollover(self):
        # toc near the end of a week, toe given in the next week
        sat = prn2sat(5, SYS_GPS)
        toc = gpst2time(2262, 604700.0)
        data = legacy_fields(2262, 100.0)
        eph = decode_ephemeris(sat, toc, data, NavFormat.LEGACY)
        self.assertEqual(eph.toe, gpst2time(2263, 100.0))

    def test_invalid_iod(self):
        sat = prn2sat(5, SYS_GPS)
        data = legacy_fields(2262, 345600.0, iode=1024)
        self.assertIsNone(decode_ephemeris(sat, 0.0, data, NavFormat.LEGACY))

    def test_glonass_not_supported(self):
        data = legacy_fields(2262, 0.0)
        self.assertIsNone(decode_ephemeris(prn2sat(3, SYS_GLO), 0.0, data, NavFormat.LEGACY))

    def test_too_few_fields(self):
        with self.assertRaises(ValueError):
            decode_ephemeris(prn2sat(5, SYS_GPS), 0.0, [0.0] * 10, NavFormat.LEGACY)


class TestDecodeModernized(unittest.TestCase):

    def setUp(self):
        self.sat = prn2sat(23, SYS_BDS)
        self.toc = bdt2time(950, 345600.0)
        self.data = [0.0] * NFIELDS[NavFormat.MODERNIZED]
        self.data[3] = 0.01          # dotA
        self.data[10] = 5282.6
        self.data[11] = 345600.0
        self.data[20] = 1.0e-13      # dotn
        self.data[21] = 3            # MEO
        self.data[34] = 12           # IODC
        self.data[35] = 345540.0
        self.data[38] = 12           # IODE

    def test_explicit_week(self):
        eph = decode_ephemeris(self.sat, self.toc, self.data, NavFormat.MODERNIZED, bdt_week=950)
        self.assertEqual(eph.nav_format, NavFormat.MODERNIZED)
        self.assertEqual(eph.week, 950)
        self.assertEqual(eph.toe, bdt2gpst(self.toc))
        self.assertEqual(eph.ttr, bdt2gpst(self.toc) - 60.0)
        self.assertEqual(eph.dotA, 0.01)
        self.assertEqual(eph.sat_type, 3)
        self.assertEqual(eph.iodc, 12)

    def test_week_from_toc(self):
        eph = decode_ephemeris(self.sat, self.toc, self.data, NavFormat.MODERNIZED)
        self.assertEqual(eph.week, 950)
        self.assertEqual(eph.toe, bdt2gpst(self.toc))


class TestEncode(unittest.TestCase):
    """encode_ephemeris inverts decode_ephemeris"""

    def check_round_trip(self, sat, toc, data, nav_format, bdt_week=None):
        eph = decode_ephemeris(sat, toc, data, nav_format, bdt_week=bdt_week)
        toc2, data2 = encode_ephemeris(eph)
        eph2 = decode_ephemeris(sat, toc2, data2, nav_format, bdt_week=eph.week)
        self.assertEqual(toc2, toc)
        self.assertEqual(len(data2), NFIELDS[nav_format])
        for name in ('toc', 'toe', 'ttr', 'toes', 'week', 'iode', 'iodc', 'svh',
                     'sva', 'tgd', 'nav_format', 'M0', 'e', 'OMG0', 'omg', 'i0'):
            self.assertEqual(getattr(eph2, name), getattr(eph, name), name)
        self.assertAlmostEqual(eph2.A, eph.A, delta=1e-6)

    def test_gps(self):
        data = legacy_fields(2262, 345600.0)
        data[26] = 20.0
        self.check_round_trip(prn2sat(5, SYS_GPS), gpst2time(2262, 345600.0),
                              data, NavFormat.LEGACY)

    def test_bds_d1(self):
        data = legacy_fields(950, 345600.0)
        data[28] = 21.0
        self.check_round_trip(prn2sat(23, SYS_BDS), bdt2time(950, 345600.0),
                              data, NavFormat.LEGACY)


if __name__ == '__main__':
    unittest.main()
