"""Shared fixtures: synthetic PPP-B2b streams and broadcast ephemerides."""

import pytest

from pyb2b.core.constants import SYS_BDS, SYS_GPS, prn2sat
from pyb2b.core.data_structures import EphemerisRecord, EphemerisStore, NavFormat
from pyb2b.core.time import bdt2gpst, bdt2time
from pyb2b.ssr.b2b_reader import b2b_time

WEEK = 950           # BDT week of the synthetic streams
SOW = 345600         # BDT seconds of week of the first record

C23 = prn2sat(23, SYS_BDS)
C25 = prn2sat(25, SYS_BDS)
G05 = prn2sat(5, SYS_GPS)


def mask_bits(size, prns):
    bits = ['0'] * size
    for prn in prns:
        bits[prn - 1] = '1'
    return ''.join(bits)


def type1_line(sow=SOW, tod=0, iod_ssr=1, iodp=3, bds=(23, 25), gps=(5,), gal=(), glo=()):
    return (f"{WEEK} {sow} {tod} 0 {iod_ssr} {iodp} "
            f"{mask_bits(63, bds)} {mask_bits(37, gps)} "
            f"{mask_bits(37, gal)} {mask_bits(37, glo)}")


def type2_line(slot, sow=SOW, tod=0, iod_ssr=1, iodn=12, iod_corr=5,
               corr=(0.1, -0.2, 0.3), ura=(1, 2)):
    return (f"1 {WEEK} {sow} {tod} 0 {iod_ssr} {iodn} {slot} {iod_corr} "
            f"{corr[0]} {corr[1]} {corr[2]} {ura[0]} {ura[1]}")


def type3_line(slot, pairs, sow=SOW, tod=0, iod_ssr=1, code_num=None):
    code_num = len(pairs) if code_num is None else code_num
    fields = [slot, WEEK, sow, tod, 0, iod_ssr, slot, code_num]
    for mode, bias in pairs:
        fields += [mode, bias]
    while len(fields) < 24:
        fields += [0, 0.0]
    return ' '.join(str(v) for v in fields)


def type4_line(entries, sow=SOW, tod=0, iod_ssr=1, iodp=3, subtype=0):
    fields = [subtype, WEEK, sow, tod, 0, iod_ssr, iodp, subtype, len(entries)]
    entries = list(entries) + [(0, 0.0)] * (23 - len(entries))
    for iod_corr, c0 in entries:
        fields += [iod_corr, c0]
    fields += [WEEK, sow]
    return ' '.join(str(v) for v in fields)


def stream_time(sow=SOW):
    """Epoch (GPST) of a synthetic record"""
    return b2b_time(WEEK, sow)


def write_stream(path, lines):
    path.write_text('\n'.join(lines) + '\n')
    return path


def bds_meo_eph(sat=C23, iodc=12, toes=SOW, f0=1.0E-4, f1=1.0E-11, f2=0.0,
                nav_format=NavFormat.MODERNIZED):
    """BeiDou MEO ephemeris with toe/toc at BDT week WEEK, toes"""
    t = bdt2gpst(bdt2time(WEEK, toes))
    return EphemerisRecord(
        sat=sat, toc=t, toe=t, ttr=t - 60.0, toes=toes, week=WEEK,
        f0=f0, f1=f1, f2=f2, A=27906100.0, e=0.0005, i0=0.96, OMG0=1.0,
        omg=0.5, M0=0.3, deln=4.0E-9, OMGd=-7.0E-9, idot=1.0E-10,
        iode=iodc, iodc=iodc, nav_format=nav_format)


@pytest.fixture
def nav():
    store = EphemerisStore()
    store.add(bds_meo_eph(C23))
    store.add(bds_meo_eph(C25, iodc=7))
    return store


@pytest.fixture
def streams(tmp_path):
    """Type 1-4 stream files for C23, C25 and G05 at one epoch"""
    return {
        1: write_stream(tmp_path / "type1.txt", [type1_line()]),
        2: write_stream(tmp_path / "type2.txt", [
            type2_line(23),
            type2_line(25, iodn=7, corr=(26.2128, 0.0, 0.0)),
            type2_line(63 + 5, iodn=40),
        ]),
        3: write_stream(tmp_path / "type3.txt", [
            type3_line(23, [(0, 1.5), (7, -0.5)]),
            type3_line(63 + 5, [(0, 0.8), (8, -0.4)]),
        ]),
        4: write_stream(tmp_path / "type4.txt", [
            type4_line([(5, 0.6), (5, 27.0), (5, -1.2)]),
        ]),
    }
