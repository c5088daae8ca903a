#!/usr/bin/env python3
"""Test suite for GNSS time handling"""

import copy
import math
import pickle
import unittest
from datetime import datetime

import numpy as np

from pysateph.core.constants import HALF_WEEK, SEC_IN_WEEK
from pysateph.core.time import GNSSTime, wrap_half_week


class TestWrapHalfWeek(unittest.TestCase):
    """Test wrapping of time differences into the half-week window"""

    def test_inside_window_unchanged(self):
        for dt in (0.0, 1.5, -1.5, 302399.0, -302399.0, HALF_WEEK):
            self.assertEqual(wrap_half_week(dt), dt)

    def test_single_wrap(self):
        self.assertEqual(wrap_half_week(400000.0), 400000.0 - SEC_IN_WEEK)
        self.assertEqual(wrap_half_week(-400000.0), -400000.0 + SEC_IN_WEEK)

    def test_boundaries(self):
        # Window is (-302400, 302400]
        self.assertEqual(wrap_half_week(-HALF_WEEK), HALF_WEEK)
        self.assertEqual(wrap_half_week(HALF_WEEK + 1.0), -HALF_WEEK + 1.0)

    def test_multiple_weeks(self):
        self.assertEqual(wrap_half_week(10 * SEC_IN_WEEK + 5.0), 5.0)
        self.assertEqual(wrap_half_week(-3 * SEC_IN_WEEK - 5.0), -5.0)

    def test_result_properties(self):
        """Result is inside the window and differs by whole weeks"""
        rng = np.random.default_rng(42)
        for dt in rng.uniform(-5e7, 5e7, 500):
            dt = float(dt)
            wrapped = wrap_half_week(dt)
            self.assertGreater(wrapped, -HALF_WEEK)
            self.assertLessEqual(wrapped, HALF_WEEK)
            weeks = (dt - wrapped) / SEC_IN_WEEK
            self.assertAlmostEqual(weeks, round(weeks), places=6)

    def test_non_finite(self):
        self.assertEqual(wrap_half_week(math.inf), math.inf)
        self.assertTrue(math.isnan(wrap_half_week(math.nan)))


class TestGNSSTime(unittest.TestCase):
    """Test GNSSTime values"""

    def test_normalization(self):
        t = GNSSTime(100, -1.0)
        self.assertEqual(t.week, 99)
        self.assertEqual(t.tow, SEC_IN_WEEK - 1.0)

        t = GNSSTime(100, SEC_IN_WEEK + 10.0)
        self.assertEqual(t.week, 101)
        self.assertEqual(t.tow, 10.0)

    def test_invalid_system(self):
        with self.assertRaises(ValueError):
            GNSSTime(0, 0.0, 'XYZ')

    def test_system_case_insensitive(self):
        self.assertEqual(GNSSTime(1, 2.0, 'gal').time_sys, 'GAL')

    def test_from_datetime(self):
        self.assertEqual(GNSSTime.from_datetime(datetime(1980, 1, 6)), GNSSTime(0, 0.0))
        t = GNSSTime.from_datetime(datetime(2024, 1, 1, 0, 0, 0))
        self.assertEqual(t.week, 2295)
        self.assertEqual(t.tow, 86400.0)

    def test_from_datetime_other_origins(self):
        self.assertEqual(GNSSTime.from_datetime(datetime(2006, 1, 1), 'BDS'), GNSSTime(0, 0.0, 'BDS'))
        self.assertEqual(GNSSTime.from_datetime(datetime(1999, 8, 22), 'GAL'), GNSSTime(0, 0.0, 'GAL'))

    def test_datetime_round_trip(self):
        dt = datetime(2023, 7, 14, 13, 45, 30)
        for sys in ('GPS', 'GAL', 'BDS', 'IRN', 'UTC'):
            self.assertEqual(GNSSTime.from_datetime(dt, sys).to_datetime(), dt)

    def test_from_gps_seconds(self):
        t = GNSSTime.from_gps_seconds(2295 * SEC_IN_WEEK + 3600.0)
        self.assertEqual((t.week, t.tow), (2295, 3600.0))
        self.assertEqual(t.to_seconds(), 2295 * SEC_IN_WEEK + 3600.0)

    def test_subtraction(self):
        a = GNSSTime(2295, 10.0)
        b = GNSSTime(2294, SEC_IN_WEEK - 20.0)
        self.assertEqual(a - b, 30.0)
        self.assertEqual(b - a, -30.0)

    def test_subtract_seconds(self):
        t = GNSSTime(2295, 10.0) - 20.0
        self.assertEqual((t.week, t.tow), (2294, SEC_IN_WEEK - 10.0))

    def test_addition(self):
        t = GNSSTime(2295, SEC_IN_WEEK - 1.0) + 2.0
        self.assertEqual((t.week, t.tow), (2296, 1.0))

    def test_mixed_systems(self):
        with self.assertRaises(ValueError):
            GNSSTime(2295, 0.0, 'GPS') - GNSSTime(1000, 0.0, 'BDS')
        with self.assertRaises(ValueError):
            GNSSTime(2295, 0.0, 'GPS') < GNSSTime(1000, 0.0, 'GAL')

    def test_comparison(self):
        a = GNSSTime(2295, 10.0)
        b = GNSSTime(2295, 20.0)
        self.assertLess(a, b)
        self.assertGreaterEqual(b, a)
        self.assertNotEqual(a, b)
        self.assertEqual(sorted([b, a]), [a, b])

    def test_is_aligned(self):
        toc = GNSSTime(2295, 0.0)
        self.assertTrue(GNSSTime(2295, 7200.0).is_aligned(toc))
        self.assertFalse(GNSSTime(2296, 7200.0).is_aligned(toc))
        self.assertTrue(GNSSTime(2296, 7200.0).is_aligned(toc, max_dt=2 * SEC_IN_WEEK))
        self.assertFalse(GNSSTime(1000, 0.0, 'BDS').is_aligned(toc))

    def test_sec_of_day(self):
        self.assertEqual(GNSSTime(2295, 86400.0 + 3600.0).sec_of_day(), 3600.0)

    def test_hashable(self):
        self.assertEqual(len({GNSSTime(1, 2.0), GNSSTime(1, 2.0), GNSSTime(1, 3.0)}), 2)

    def test_equal_times_hash_equal(self):
        a = GNSSTime(1, 4.999e-7)
        b = GNSSTime(1, 5.001e-7)
        self.assertNotEqual(a, b)
        self.assertEqual(len({a, b}), 2)
        c = GNSSTime(1, 4.999e-7, 'gps')
        self.assertEqual(a, c)
        self.assertEqual(hash(a), hash(c))

    def test_immutable(self):
        t = GNSSTime(2295, 10.0)
        for name, value in (('week', 1), ('tow', 1.0), ('time_sys', 'GAL')):
            with self.assertRaises(AttributeError):
                setattr(t, name, value)
        with self.assertRaises(AttributeError):
            t.extra = 1
        self.assertEqual((t.week, t.tow, t.time_sys), (2295, 10.0, 'GPS'))

    def test_arithmetic_returns_new_time(self):
        t = GNSSTime(2295, 10.0)
        u = t + 5.0
        self.assertEqual(t.tow, 10.0)
        self.assertEqual(u.tow, 15.0)

    def test_copy(self):
        t = GNSSTime(2295, 10.0, 'BDS')
        self.assertEqual(copy.deepcopy(t), t)
        self.assertEqual(pickle.loads(pickle.dumps(t)), t)


if __name__ == '__main__':
    unittest.main()
