"""Tests for the RINEX 4.0 navigation reader."""

import pytest

from pyb2b.core.constants import SYS_BDS, SYS_GAL, SYS_GPS, prn2sat
from pyb2b.core.data_structures import NavFormat
from pyb2b.core.time import bdt2gpst, bdt2time, gpst2time
from pyb2b.io.rinex import (RinexFormatError, RinexNav4Reader,
                            RinexVersionError, read_rinex4_nav, scan_bdt_week)

EPOCH = "2024 03 21 00 00 00"   # GPS week 2306 / BDT week 950, 345600 s


def header(version="4.01"):
    return [
        f"{version:>9}{'':11}{'N: GNSS NAV DATA':20}{'M: MIXED':20}RINEX VERSION / TYPE",
        f"{'18':>6}{'':54}LEAP SECONDS",
        f"{'':60}END OF HEADER",
    ]


def record(kind, satid, msg, data):
    """Lines of one navigation record holding the given numeric fields"""
    lines = [f"> {kind} {satid} {msg}",
             f"{satid} {EPOCH}" + ''.join(f"{v:19.12E}" for v in data[:3])]
    for k in range(3, len(data), 4):
        lines.append("    " + ''.join(f"{v:19.12E}" for v in data[k:k + 4]))
    return lines


def legacy_data(week, iode, iodc_slot, iodc):
    data = [0.0] * 31
    data[0:3] = [1.0e-4, 2.0e-11, 0.0]
    data[3] = iode
    data[8], data[10] = 0.01, 5282.6
    data[11] = 345600.0
    data[15] = 0.96
    data[21] = week
    data[23] = 2.0
    data[25] = -5.0e-9
    data[27] = 345570.0
    data[iodc_slot] = iodc
    return data


def cnv1_data(iodc):
    data = [0.0] * 39
    data[0] = 2.0e-4
    data[10] = 5282.6
    data[11] = 345600.0
    data[21] = 3
    data[34] = iodc
    data[35] = 345540.0
    data[38] = iodc
    return data


def nav_lines(version="4.01"):
    return (header(version)
            + record("EPH", "G05", "LNAV", legacy_data(2306, 40, 26, 40))
            + record("STO", "C23", "CNVX", [0.0] * 7)
            + record("EPH", "C23", "D1", legacy_data(950, 1, 28, 1))
            + record("EPH", "E11", "INAV", legacy_data(2306, 3, 26, 3))
            + record("ION", "C23", "CNVX", [0.0] * 11)
            + record("EPH", "C23", "CNV1", cnv1_data(12)))


@pytest.fixture
def nav_file(tmp_path):
    path = tmp_path / "brdm0810.24p"
    path.write_text('\n'.join(nav_lines()) + '\n')
    return path


def test_scan_bdt_week():
    assert scan_bdt_week(nav_lines()) == 950
    assert scan_bdt_week(header()) is None


def test_read_records(nav_file):
    nav = read_rinex4_nav(nav_file)
    assert nav.leaps == 18
    assert len(nav) == 3
    assert [eph.nav_format for eph in nav] == [
        NavFormat.LEGACY, NavFormat.LEGACY, NavFormat.MODERNIZED]
    assert all(eph.system != SYS_GAL for eph in nav)


def test_gps_lnav(nav_file):
    eph = next(e for e in read_rinex4_nav(nav_file) if e.sat == prn2sat(5, SYS_GPS))
    assert eph.toc == gpst2time(2306, 345600.0)
    assert eph.toe == gpst2time(2306, 345600.0)
    assert eph.iode == 40
    assert eph.iodc == 40
    assert eph.A == pytest.approx(5282.6 ** 2)
    assert eph.f0 == pytest.approx(1.0e-4)


def test_bds_records(nav_file):
    c23 = [e for e in read_rinex4_nav(nav_file) if e.sat == prn2sat(23, SYS_BDS)]
    d1, cnv1 = c23
    t = bdt2gpst(bdt2time(950, 345600.0))
    assert d1.toc == t
    assert d1.iodc == 1
    assert cnv1.week == 950
    assert cnv1.toe == t
    assert cnv1.ttr == t - 60.0
    assert cnv1.iodc == 12
    assert cnv1.sat_type == 3


def test_append_to_store(nav_file):
    nav = RinexNav4Reader(nav_file).read()
    read_rinex4_nav(nav_file, nav)
    assert len(nav) == 6


def test_old_version(tmp_path):
    path = tmp_path / "old.nav"
    path.write_text('\n'.join(nav_lines("3.04")) + '\n')
    with pytest.raises(RinexVersionError):
        read_rinex4_nav(path)


def test_missing_header(tmp_path):
    path = tmp_path / "nohdr.nav"
    path.write_text("> EPH G05 LNAV\n")
    with pytest.raises(RinexVersionError):
        read_rinex4_nav(path)


def test_bad_epoch(tmp_path):
    lines = nav_lines()
    k = lines.index("> EPH G05 LNAV")
    lines[k + 1] = "G05 2024 03 xx 00 00 00" + lines[k + 1][23:]
    path = tmp_path / "bad.nav"
    path.write_text('\n'.join(lines) + '\n')
    with pytest.raises(RinexFormatError):
        read_rinex4_nav(path)


def test_unreadable_field_skips_record(tmp_path, caplog):
    lines = nav_lines()
    k = lines.index("> EPH G05 LNAV")
    line = lines[k + 3]
    lines[k + 3] = line[:4] + f"{'1.2345XYZ+00':>19}" + line[23:]
    path = tmp_path / "corrupt.nav"
    path.write_text('\n'.join(lines) + '\n')

    with caplog.at_level("WARNING", logger="pyb2b.io.rinex"):
        nav = read_rinex4_nav(path)

    assert [eph.sat for eph in nav] == [prn2sat(23, SYS_BDS)] * 2
    assert [eph.nav_format for eph in nav] == [NavFormat.LEGACY, NavFormat.MODERNIZED]
    assert f"line {k + 1}" in caplog.text


def test_truncated_record(tmp_path):
    lines = nav_lines()[:-3]
    path = tmp_path / "short.nav"
    path.write_text('\n'.join(lines) + '\n')
    assert len(read_rinex4_nav(path)) == 2


def test_missing_file(tmp_path):
    with pytest.raises(OSError):
        read_rinex4_nav(tmp_path / "none.nav")
