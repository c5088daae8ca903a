#!/usr/bin/env python3
"""Tests for the RINEX 3 navigation reader"""

import logging

import pytest

from pysateph.core.data_structures import NAV_DATA_SIZE, SatelliteSystem
from pysateph.core.errors import RinexFormatError
from pysateph.core.time import GNSSTime
from pysateph.io.rinex import RinexNavReader, read_nav
from pysateph.satellite.propagator import compute_satellite_state


def _fmt(value, fortran=False):
    text = f"{value:19.12E}"
    return text.replace('E', 'D') if fortran else text


def _header(version='3.04', file_type='N', system='M'):
    return [
        f"{version:>9}{'':11}{file_type + ': GNSS NAV DATA':<20}{system + ': MIXED':<20}RINEX VERSION / TYPE",
        f"{'pysateph':<20}{'':20}{'20240101 000000 UTC':<20}PGM / RUN BY / DATE",
        f"{'':60}END OF HEADER",
    ]


def _block(sys_char, prn, epoch, values, fortran=False):
    """Epoch line plus continuation lines of four values"""
    y, mo, d, h, mi, s = epoch
    lines = [f"{sys_char}{prn:02d} {y:04d} {mo:02d} {d:02d} {h:02d} {mi:02d} {s:02d}"
             + ''.join(_fmt(v, fortran) for v in values[:3])]
    rest = values[3:]
    for i in range(0, len(rest), 4):
        lines.append('    ' + ''.join(_fmt(v, fortran) for v in rest[i:i + 4]))
    return lines


GPS_VALUES = [
    2.310685813427e-04, -1.136868377216e-12, 0.0,
    51.0, -112.03125, 4.055169496090e-09, 2.284590232806,
    -5.826354026794e-06, 1.195520209149e-02, 4.837661981583e-06, 5153.672180176,
    93600.0, 2.328306436539e-08, -2.519734382374, 1.490116119385e-08,
    0.9878829547839, 282.78125, 0.929037422627, -7.910687215070e-09,
    3.428714225378e-11, 1.0, 2295.0, 0.0,
    2.0, 0.0, 5.122274160385e-09, 51.0,
    86418.0, 4.0,
]

GLO_VALUES = [
    -2.5e-05, 1.8e-12, 86370.0,
    -14413.0, 1.2, 0.0, 0.0,
    18000.0, -0.5, 1e-09, 1.0,
    9000.0, 3.1, -2e-09, 0.0,
]


def _write(path, lines):
    path.write_text('\n'.join(lines) + '\n')
    return path


@pytest.fixture
def nav_file(tmp_path):
    lines = _header()
    lines += _block('G', 1, (2024, 1, 1, 2, 0, 0), GPS_VALUES)
    lines += _block('X', 7, (2024, 1, 1, 2, 0, 0), GLO_VALUES)
    lines += _block('R', 4, (2024, 1, 1, 0, 15, 0), GLO_VALUES, fortran=True)
    lines += _block('E', 11, (2024, 1, 1, 1, 0, 0), GPS_VALUES[:28])
    return _write(tmp_path / 'BRDC00TST_R_20240010000_01D_MN.rnx', lines)


def test_header(nav_file):
    with RinexNavReader(nav_file) as reader:
        assert reader.version == 3.04
        assert reader.system == 'M'


def test_gps_record(nav_file):
    with RinexNavReader(nav_file) as reader:
        record = reader.read_next()
    assert record.system is SatelliteSystem.GPS
    assert record.prn == 1
    assert record.toc == GNSSTime(2295, 93600.0, 'GPS')
    assert len(record.data) == NAV_DATA_SIZE
    assert record.field('sqrtA') == pytest.approx(5153.672180176)
    assert record.field('toe') == 93600.0
    assert record.field('fit') == 4.0
    assert record.data[29] == 0.0


def test_unknown_system_skipped(nav_file, caplog):
    with caplog.at_level(logging.WARNING, logger='pysateph.io.rinex'):
        records = read_nav(nav_file)
    assert [r.sat_id for r in records] == ['G01', 'R04', 'E11']
    assert "unknown satellite system 'X'" in caplog.text


def test_fortran_exponent(nav_file):
    records = read_nav(nav_file)
    glo = records[1]
    assert glo.toc == GNSSTime(2295, 87300.0, 'UTC')
    assert glo.field('minus_tauN') == pytest.approx(-2.5e-05)
    assert glo.field('Yacc') == pytest.approx(1e-09)
    assert glo.field('X') == -14413.0


def test_time_scales(nav_file):
    gal = read_nav(nav_file)[2]
    assert gal.toc.time_sys == 'GAL'
    assert gal.toc.to_datetime().hour == 1


def test_peek_skip_rewind(nav_file):
    with RinexNavReader(nav_file) as reader:
        assert reader.peek_system() is SatelliteSystem.GPS
        assert reader.peek_system() is SatelliteSystem.GPS
        assert reader.skip_next()
        assert reader.peek_system() is None  # 'X' block
        assert reader.skip_next()
        assert reader.peek_system() is SatelliteSystem.GLONASS
        assert reader.read_next().sat_id == 'R04'
        assert reader.read_next().sat_id == 'E11'
        assert reader.read_next() is None
        assert reader.peek_system() is None
        assert not reader.skip_next()

        reader.rewind()
        assert reader.read_next().sat_id == 'G01'


def test_iteration(nav_file):
    with RinexNavReader(nav_file) as reader:
        first = [r.sat_id for r in reader]
        reader.rewind()
        second = [r.sat_id for r in reader]
    assert first == second == ['G01', 'R04', 'E11']


def test_records_are_usable(nav_file):
    gps = read_nav(nav_file)[0]
    rs, dts = compute_satellite_state(gps, GNSSTime(2295, 93600.0 + 900.0))
    assert 25.5e6 < sum(x * x for x in rs) ** 0.5 < 27.0e6
    assert dts == pytest.approx(2.3107e-4, abs=1e-7)


def test_blank_lines_ignored(tmp_path):
    lines = _header() + [''] + _block('G', 2, (2024, 1, 1, 0, 0, 0), GPS_VALUES) + ['']
    records = read_nav(_write(tmp_path / 'blank.rnx', lines))
    assert len(records) == 1


def test_rinex2_rejected(tmp_path):
    path = _write(tmp_path / 'old.nav', _header(version='2.11'))
    with pytest.raises(RinexFormatError):
        RinexNavReader(path)


def test_observation_file_rejected(tmp_path):
    path = _write(tmp_path / 'obs.rnx', _header(file_type='O'))
    with pytest.raises(RinexFormatError):
        RinexNavReader(path)


def test_missing_end_of_header(tmp_path):
    path = _write(tmp_path / 'cut.rnx', _header()[:2])
    with pytest.raises(RinexFormatError):
        RinexNavReader(path)


def test_not_rinex(tmp_path):
    path = _write(tmp_path / 'junk.txt', ['hello world'])
    with pytest.raises(RinexFormatError):
        RinexNavReader(path)


def test_malformed_value(tmp_path):
    lines = _header() + _block('G', 2, (2024, 1, 1, 0, 0, 0), GPS_VALUES)
    lines[4] = lines[4][:10] + 'abc' + lines[4][13:]
    with pytest.raises(RinexFormatError):
        read_nav(_write(tmp_path / 'bad.rnx', lines))


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        RinexNavReader(tmp_path / 'missing.rnx')
