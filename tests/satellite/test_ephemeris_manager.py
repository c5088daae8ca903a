#!/usr/bin/env python3
"""Test suite for broadcast record storage and selection"""

import unittest

from pysateph.core.data_structures import NavigationRecord, SatelliteSystem
from pysateph.core.time import GNSSTime
from pysateph.satellite.ephemeris import (
    DEFAULT_VALIDITY, VALIDITY_PERIODS, EphemerisManager, is_healthy,
    is_record_valid, select_record, validity_period
)


def gps(prn, tow, week=2295, **values):
    return NavigationRecord.from_fields(SatelliteSystem.GPS, prn, GNSSTime(week, tow),
                                        dict({'toe': tow}, **values))


class TestValidity(unittest.TestCase):

    def test_system_periods(self):
        self.assertEqual(VALIDITY_PERIODS[SatelliteSystem.GPS], 7200.0)
        self.assertEqual(VALIDITY_PERIODS[SatelliteSystem.GALILEO], 10800.0)
        self.assertEqual(VALIDITY_PERIODS[SatelliteSystem.BEIDOU], 21600.0)
        self.assertEqual(VALIDITY_PERIODS[SatelliteSystem.GLONASS], 1800.0)
        sbas = NavigationRecord(SatelliteSystem.SBAS, 120, GNSSTime(2295, 0.0), ())
        self.assertEqual(validity_period(sbas), DEFAULT_VALIDITY)

    def test_fit_interval(self):
        self.assertEqual(validity_period(gps(1, 0.0)), 7200.0)
        self.assertEqual(validity_period(gps(1, 0.0, fit=6.0)), 10800.0)

    def test_health(self):
        self.assertTrue(is_healthy(gps(1, 0.0)))
        self.assertFalse(is_healthy(gps(1, 0.0, health=1.0)))
        bds = NavigationRecord.from_fields(SatelliteSystem.BEIDOU, 20, GNSSTime(900, 0.0, 'BDS'),
                                           {'SatH1': 1.0})
        self.assertFalse(is_healthy(bds))

    def test_record_valid(self):
        record = gps(1, 7200.0)
        self.assertTrue(is_record_valid(record, GNSSTime(2295, 14400.0)))
        self.assertFalse(is_record_valid(record, GNSSTime(2295, 14401.0)))
        self.assertFalse(is_record_valid(record, GNSSTime(2295, 7200.0, 'GAL')))


class TestSelectRecord(unittest.TestCase):

    def setUp(self):
        self.records = [gps(1, 0.0), gps(1, 7200.0), gps(1, 14400.0), gps(2, 7200.0)]

    def test_nearest(self):
        best = select_record(self.records, SatelliteSystem.GPS, 1, GNSSTime(2295, 8000.0))
        self.assertEqual(best.toc, GNSSTime(2295, 7200.0))
        best = select_record(self.records, SatelliteSystem.GPS, 1, GNSSTime(2295, 12000.0))
        self.assertEqual(best.toc, GNSSTime(2295, 14400.0))

    def test_other_satellite(self):
        best = select_record(self.records, SatelliteSystem.GPS, 2, GNSSTime(2295, 0.0))
        self.assertEqual(best.prn, 2)
        self.assertIsNone(select_record(self.records, SatelliteSystem.GALILEO, 1, GNSSTime(2295, 0.0)))

    def test_outside_validity(self):
        self.assertIsNone(select_record(self.records, SatelliteSystem.GPS, 1, GNSSTime(2295, 30000.0)))

    def test_unhealthy_skipped(self):
        records = [gps(3, 7200.0, health=1.0), gps(3, 14400.0)]
        best = select_record(records, SatelliteSystem.GPS, 3, GNSSTime(2295, 7300.0))
        self.assertEqual(best.toc.tow, 14400.0)

    def test_across_week(self):
        records = [gps(4, 604000.0, week=2295)]
        best = select_record(records, SatelliteSystem.GPS, 4, GNSSTime(2296, 1000.0))
        self.assertIs(best, records[0])


class TestEphemerisManager(unittest.TestCase):

    def test_add_and_get(self):
        manager = EphemerisManager()
        manager.add_records([gps(1, 7200.0), gps(1, 0.0), gps(5, 0.0)])
        self.assertEqual(len(manager), 3)
        self.assertEqual(manager.satellites(), [(SatelliteSystem.GPS, 1), (SatelliteSystem.GPS, 5)])
        tows = [r.toc.tow for r in manager.records[(SatelliteSystem.GPS, 1)]]
        self.assertEqual(tows, [0.0, 7200.0])
        self.assertEqual(manager.get_record(SatelliteSystem.GPS, 1, GNSSTime(2295, 6000.0)).toc.tow, 7200.0)

    def test_same_toc_supersedes(self):
        manager = EphemerisManager()
        manager.add_record(gps(1, 7200.0, IODE=10.0))
        manager.add_record(gps(1, 7200.0, IODE=11.0))
        self.assertEqual(len(manager), 1)
        record = manager.get_record(SatelliteSystem.GPS, 1, GNSSTime(2295, 7200.0))
        self.assertEqual(record.field('IODE'), 11.0)

    def test_unknown_satellite(self):
        self.assertIsNone(EphemerisManager().get_record(SatelliteSystem.GPS, 9, GNSSTime(2295, 0.0)))

    def test_clean_old_records(self):
        manager = EphemerisManager(max_age=7200.0)
        manager.add_records([gps(1, 0.0), gps(1, 7200.0), gps(2, 0.0)])
        manager.clean_old_records(GNSSTime(2295, 10000.0))
        self.assertEqual(len(manager), 1)
        self.assertEqual(manager.satellites(), [(SatelliteSystem.GPS, 1)])

    def test_clean_keeps_other_time_scales(self):
        manager = EphemerisManager()
        gal = NavigationRecord(SatelliteSystem.GALILEO, 1, GNSSTime(1200, 0.0, 'GAL'), ())
        manager.add_record(gal)
        manager.clean_old_records(GNSSTime(2400, 0.0))
        self.assertEqual(len(manager), 1)


if __name__ == '__main__':
    unittest.main()
