#!/usr/bin/env python3
"""Test suite for GLONASS state integration"""

import math
import unittest

import numpy as np

from pysateph.core.constants import MU_GLO, OMGE_GLO
from pysateph.core.data_structures import NavigationRecord, SatelliteSystem
from pysateph.core.time import GNSSTime
from pysateph.satellite.glonass import broadcast_state, glonass_clock_bias, glonass_state

R_KM = 25510.0
INC = math.radians(64.8)


def circular_state():
    """ECEF state (km, km/s) of a circular inclined orbit crossing the x axis"""
    v = math.sqrt(MU_GLO / (R_KM * 1e3)) / 1e3
    return {
        'X': R_KM, 'Y': 0.0, 'Z': 0.0,
        'Xdot': 0.0,
        'Ydot': v * math.cos(INC) - OMGE_GLO * R_KM,
        'Zdot': v * math.sin(INC),
    }


def glonass_record(**values):
    base = circular_state()
    base.update(values)
    return NavigationRecord.from_fields(SatelliteSystem.GLONASS, 4, GNSSTime(2295, 3600.0, 'UTC'), base)


class TestGlonassState(unittest.TestCase):
    """RK4 propagation of the broadcast state"""

    def setUp(self):
        self.record = glonass_record()

    def test_broadcast_state_units(self):
        x0, acc = broadcast_state(glonass_record(Xacc=1e-9))
        self.assertEqual(x0[0], R_KM * 1e3)
        self.assertAlmostEqual(acc[0], 1e-6)

    def test_zero_elapsed_time(self):
        rs, vs = glonass_state(self.record, 0.0)
        x0, _ = broadcast_state(self.record)
        np.testing.assert_array_equal(rs, x0[:3])
        np.testing.assert_array_equal(vs, x0[3:])

    def test_radius_preserved(self):
        r0 = R_KM * 1e3
        for dt in (-1800.0, 900.0, 1800.0):
            rs, _ = glonass_state(self.record, dt)
            self.assertAlmostEqual(np.linalg.norm(rs) / r0, 1.0, delta=5e-4)

    def test_moves_along_track(self):
        rs, vs = glonass_state(self.record, 60.0)
        x0, _ = broadcast_state(self.record)
        np.testing.assert_allclose(rs, x0[:3] + x0[3:] * 60.0, rtol=0, atol=1500.0)
        self.assertGreater(rs[2], 0.0)

    def test_forward_backward(self):
        rs, vs = glonass_state(self.record, 900.0)
        back = glonass_record(X=rs[0] / 1e3, Y=rs[1] / 1e3, Z=rs[2] / 1e3,
                              Xdot=vs[0] / 1e3, Ydot=vs[1] / 1e3, Zdot=vs[2] / 1e3)
        rs0, vs0 = glonass_state(back, -900.0)
        x0, _ = broadcast_state(self.record)
        np.testing.assert_allclose(rs0, x0[:3], atol=0.05)
        np.testing.assert_allclose(vs0, x0[3:], atol=1e-4)

    def test_step_size(self):
        rs60, _ = glonass_state(self.record, 1000.0, step=60.0)
        rs10, _ = glonass_state(self.record, 1000.0, step=10.0)
        np.testing.assert_allclose(rs60, rs10, atol=0.05)

    def test_velocity_consistent_with_position(self):
        h = 1.0
        rp, _ = glonass_state(self.record, 600.0 + h)
        rm, _ = glonass_state(self.record, 600.0 - h)
        _, vs = glonass_state(self.record, 600.0)
        np.testing.assert_allclose((rp - rm) / (2 * h), vs, atol=1e-3)

    def test_luni_solar_acceleration(self):
        acc = 3e-9  # km/s^2
        accelerated = glonass_record(Zacc=acc)
        rs_a, _ = glonass_state(accelerated, 600.0)
        rs, _ = glonass_state(self.record, 600.0)
        self.assertAlmostEqual(rs_a[2] - rs[2], 0.5 * acc * 1e3 * 600.0 ** 2, delta=0.05)

    def test_invalid_step(self):
        for step in (0.0, -60.0):
            with self.assertRaises(ValueError):
                glonass_state(self.record, 100.0, step=step)

    def test_non_finite_elapsed_time(self):
        rs, vs = glonass_state(self.record, float('nan'))
        self.assertTrue(np.all(np.isnan(rs)))
        self.assertTrue(np.all(np.isnan(vs)))


class TestGlonassClock(unittest.TestCase):

    def test_linear_model(self):
        record = glonass_record(minus_tauN=-2.5e-5, gammaN=1.8e-12)
        self.assertEqual(glonass_clock_bias(record, 0.0), -2.5e-5)
        self.assertAlmostEqual(glonass_clock_bias(record, 900.0), -2.5e-5 + 1.8e-12 * 900.0, places=18)


if __name__ == '__main__':
    unittest.main()
