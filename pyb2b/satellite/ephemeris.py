# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Broadcast ephemeris decoding from RINEX-4 numeric fields.

A navigation record body is handled as a flat array of the numbers it
carries, in file order: the three clock terms from the time-tag line, then
four values per continuation line. The legacy layout (GPS/QZSS LNAV, BeiDou
D1/D2) fills 29 values and the modernized BeiDou layout (CNV1/CNV2) fills 39.

Only the slots used below are interpreted; spares are ignored on decode and
written as zero on encode.
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple

from ..core.constants import (BDT_WEEK_OFFSET, SYS_BDS, SYS_GAL, SYS_GPS,
                              SYS_QZS, sat2id, sat2sys)
from ..core.data_structures import EphemerisRecord, NavFormat
from ..core.time import (adjweek, bdt2gpst, bdt2time, gpst2bdt, gpst2time,
                         time2gpst)

logger = logging.getLogger(__name__)

# Number of numeric fields of a complete record
NFIELDS = {
    NavFormat.LEGACY: 29,
    NavFormat.MODERNIZED: 39,
}

# ura values (GPS ICD 20.3.3.3.1.1)
URA_EPH = (
    2.4, 3.4, 4.85, 6.85, 9.65, 13.65, 24.0, 48.0, 96.0, 192.0, 384.0,
    768.0, 1536.0, 3072.0, 6144.0, 0.0
)

_SUPPORTED_SYS = SYS_GPS | SYS_GAL | SYS_QZS | SYS_BDS


def uraindex(value: float) -> int:
    """URA in meters to URA index (first table entry not below value)"""
    for i in range(15):
        if URA_EPH[i] >= value:
            return i
    return 15


def ura_value(sva: int) -> float:
    """URA index to URA in meters, 0.0 outside 0-15"""
    return URA_EPH[sva] if 0 <= sva <= 15 else 0.0


def var_uraeph(sva: int) -> float:
    """Position error variance (m^2) of a broadcast ephemeris from its URA index"""
    if sva < 0 or sva > 14:
        return 6144.0 ** 2
    return URA_EPH[sva] ** 2


def bdt_week_of(t: float) -> int:
    """BDT week number of a GPST epoch"""
    return time2gpst(gpst2bdt(t))[0] - BDT_WEEK_OFFSET


def _valid_iod(sat, eph):
    if not 0 <= eph.iode <= 1023:
        logger.warning("rinex nav invalid: sat=%s iode=%d", sat2id(sat), eph.iode)
        return False
    if not 0 <= eph.iodc <= 1023:
        logger.warning("rinex nav invalid: sat=%s iodc=%d", sat2id(sat), eph.iodc)
        return False
    return True


def _orbit_fields(data):
    return dict(
        f0=data[0], f1=data[1], f2=data[2],
        crs=data[4], deln=data[5], M0=data[6],
        cuc=data[7], e=data[8], cus=data[9], A=data[10] ** 2,
        cic=data[12], OMG0=data[13], cis=data[14],
        i0=data[15], crc=data[16], omg=data[17], OMGd=data[18],
        idot=data[19],
    )


def _decode_legacy(sat, sys, toc, data):
    fields = _orbit_fields(data)
    toes = data[11]
    week = int(data[21])

    if sys == SYS_BDS:
        # D1/D2: BDT epochs, AODE/AODC as issue of data
        toc = bdt2gpst(toc)
        toe = bdt2gpst(bdt2time(week, toes))
        ttr = bdt2gpst(bdt2time(week, data[27]))
        iode, iodc = int(data[3]), int(data[28])
        tgd = (data[25], data[26])
        extra = {}
    else:
        toe = gpst2time(week, toes)
        ttr = gpst2time(week, data[27])
        iode = int(data[3])
        # Galileo IODnav stands in for both
        iodc = iode if sys == SYS_GAL else int(data[26])
        tgd = (data[25],) if sys != SYS_GAL else (data[25], data[26])
        extra = dict(code=int(data[20]), flag=int(data[22]), fit=data[28])

    return EphemerisRecord(
        sat=sat, toc=toc, toe=adjweek(toe, toc), ttr=adjweek(ttr, toc),
        toes=toes, week=week, tgd=tgd, iode=iode, iodc=iodc,
        svh=int(data[24]), sva=uraindex(data[23]),
        nav_format=NavFormat.LEGACY, **fields, **extra)


def _decode_modernized(sat, sys, toc, data, bdt_week):
    fields = _orbit_fields(data)
    toes = data[11]

    if sys == SYS_BDS:
        toc = bdt2gpst(toc)
        week = bdt_week if bdt_week is not None else bdt_week_of(toc)
        toe = bdt2gpst(bdt2time(week, toes))
        ttr = bdt2gpst(bdt2time(week, data[35]))
    else:
        week = time2gpst(toc)[0]
        toe = gpst2time(week, toes)
        ttr = gpst2time(week, data[35])

    return EphemerisRecord(
        sat=sat, toc=toc, toe=adjweek(toe, toc), ttr=adjweek(ttr, toc),
        toes=toes, week=week,
        dotA=data[3], dotn=data[20], sat_type=int(data[21]),
        tgd=(data[29], data[30], data[27]),
        svh=int(data[32]), iode=int(data[38]), iodc=int(data[34]),
        nav_format=NavFormat.MODERNIZED, **fields)


def decode_ephemeris(sat: int, toc: float, data: Sequence[float],
                     nav_format: NavFormat,
                     bdt_week: Optional[int] = None) -> Optional[EphemerisRecord]:
    """
    Decode the numeric fields of one navigation record.

    Parameters
    ----------
    sat : int
        Satellite number
    toc : float
        Epoch of the record time tag, in the satellite's own time system
        (BDT for BeiDou) on the GPS-seconds axis
    data : sequence of float
        Numeric fields in file order, at least ``NFIELDS[nav_format]`` long
    nav_format : NavFormat
        Field layout of the record
    bdt_week : int, optional
        BDT week for modernized BeiDou records, whose layout carries no week.
        Derived from ``toc`` when omitted.

    Returns
    -------
    EphemerisRecord or None
        None for an unsupported system or an issue of data outside [0, 1023]
    """
    if nav_format not in NFIELDS:
        raise ValueError(f"Unknown navigation format: {nav_format}")
    if len(data) < NFIELDS[nav_format]:
        raise ValueError(
            f"{nav_format.name} record needs {NFIELDS[nav_format]} fields, got {len(data)}")

    sys = sat2sys(sat)
    if not sys & _SUPPORTED_SYS:
        logger.debug("ephemeris of unsupported satellite sat=%d skipped", sat)
        return None

    if nav_format == NavFormat.LEGACY:
        eph = _decode_legacy(sat, sys, toc, data)
    else:
        eph = _decode_modernized(sat, sys, toc, data, bdt_week)

    if not _valid_iod(sat, eph):
        return None
    return eph


def encode_ephemeris(eph: EphemerisRecord) -> Tuple[float, List[float]]:
    """
    Rebuild the record time tag and numeric fields of an ephemeris.

    Inverse of :func:`decode_ephemeris`: decoding the returned values with
    ``bdt_week=eph.week`` gives back an equal record.

    Returns
    -------
    toc : float
        Time tag in the satellite's own time system
    data : list of float
        29 or 39 numeric fields
    """
    sys = sat2sys(eph.sat)
    data = [0.0] * NFIELDS[eph.nav_format]

    data[0], data[1], data[2] = eph.f0, eph.f1, eph.f2
    data[4], data[5], data[6] = eph.crs, eph.deln, eph.M0
    data[7], data[8], data[9], data[10] = eph.cuc, eph.e, eph.cus, math.sqrt(eph.A)
    data[11], data[12], data[13], data[14] = eph.toes, eph.cic, eph.OMG0, eph.cis
    data[15], data[16], data[17], data[18] = eph.i0, eph.crc, eph.omg, eph.OMGd
    data[19] = eph.idot

    toc = eph.toc
    ttr = eph.ttr
    if sys == SYS_BDS:
        toc = gpst2bdt(toc)
        ttr = gpst2bdt(ttr)
    ttr_tow = time2gpst(ttr)[1]

    if eph.nav_format == NavFormat.LEGACY:
        data[3] = eph.iode
        data[21] = eph.week
        data[23] = ura_value(eph.sva)
        data[24] = eph.svh
        data[25] = eph.tgd[0]
        data[27] = ttr_tow
        if sys == SYS_BDS:
            data[26] = eph.tgd[1]
            data[28] = eph.iodc
        else:
            data[20], data[22], data[28] = eph.code, eph.flag, eph.fit
            data[26] = eph.tgd[1] if sys == SYS_GAL else eph.iodc
    else:
        data[3], data[20], data[21] = eph.dotA, eph.dotn, eph.sat_type
        data[29], data[30], data[27] = eph.tgd
        data[32], data[34], data[35], data[38] = eph.svh, eph.iodc, ttr_tow, eph.iode

    return toc, data
