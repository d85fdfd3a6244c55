#!/usr/bin/env python3
"""Tests for B2b processing options"""

import dataclasses
import unittest

from pyb2b.core.options import (DEFAULT_OPTIONS, DTTOL, MAXAGE_B2B,
                                MAXAGE_B2B_CBIAS, MAXAGE_B2B_CLOCK, MAXDTOE_CMP,
                                B2bOptions)


class TestB2bOptions(unittest.TestCase):

    def test_defaults(self):
        self.assertEqual(DEFAULT_OPTIONS.dttol, DTTOL)
        self.assertEqual(DEFAULT_OPTIONS.maxage_orbit, MAXAGE_B2B)
        self.assertEqual(DEFAULT_OPTIONS.maxage_clock, MAXAGE_B2B_CLOCK)
        self.assertEqual(DEFAULT_OPTIONS.maxage_cbias, MAXAGE_B2B_CBIAS)
        self.assertEqual(DEFAULT_OPTIONS.maxdtoe_cmp, MAXDTOE_CMP)

    def test_age_limits(self):
        self.assertEqual(MAXAGE_B2B, 96.0)
        self.assertEqual(MAXAGE_B2B_CLOCK, 12.0)
        self.assertEqual(MAXAGE_B2B_CBIAS, 86400.0)

    def test_from_dict(self):
        opt = B2bOptions.from_dict({'maxage_clock': 30, 'dttol': '0.5'})
        self.assertEqual(opt.maxage_clock, 30.0)
        self.assertEqual(opt.dttol, 0.5)
        self.assertEqual(opt.maxage_orbit, MAXAGE_B2B)

    def test_unknown_key(self):
        with self.assertRaises(ValueError):
            B2bOptions.from_dict({'maxage': 1.0})

    def test_frozen(self):
        with self.assertRaises(dataclasses.FrozenInstanceError):
            DEFAULT_OPTIONS.dttol = 1.0


if __name__ == '__main__':
    unittest.main()
