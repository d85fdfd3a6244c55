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

"""Legacy broadcast ephemeris evaluation through cssrlib.

pyb2b keeps ephemerides as :class:`EphemerisRecord` on the GPS-seconds axis;
cssrlib works with its own ``Eph`` objects, ``gtime_t`` epochs and satellite
numbering. This module converts between the two and delegates the LNAV/D1/D2
orbit and clock model to ``cssrlib.ephemeris.eph2pos``.
"""

from typing import Optional, Tuple

import cssrlib.ephemeris
import numpy as np
from cssrlib.gnss import Eph, gpst2time, prn2sat, uGNSS

from ..core.constants import (SYS_BDS, SYS_GAL, SYS_GLO, SYS_GPS, SYS_QZS,
                              sat2prn, sat2sys)
from ..core.data_structures import EphemerisRecord
from ..core.time import time2gpst
from .ephemeris import var_uraeph

_SYS_TO_UGNSS = {
    SYS_GPS: uGNSS.GPS,
    SYS_GLO: uGNSS.GLO,
    SYS_GAL: uGNSS.GAL,
    SYS_BDS: uGNSS.BDS,
    SYS_QZS: uGNSS.QZS,
}


def to_gtime(t: float):
    """GPS seconds to cssrlib gtime_t"""
    week, tow = time2gpst(t)
    return gpst2time(week, tow)


def to_cssrlib_eph(eph: EphemerisRecord) -> Eph:
    """Convert a legacy-format record to a cssrlib ``Eph``"""
    sys = sat2sys(eph.sat)
    ceph = Eph(prn2sat(_SYS_TO_UGNSS[sys], sat2prn(eph.sat)))
    ceph.mode = 0
    ceph.toc = to_gtime(eph.toc)
    ceph.toe = to_gtime(eph.toe)
    ceph.tot = to_gtime(eph.ttr)
    ceph.toes = eph.toes
    ceph.week = eph.week
    ceph.af0, ceph.af1, ceph.af2 = eph.f0, eph.f1, eph.f2
    ceph.A, ceph.e, ceph.i0 = eph.A, eph.e, eph.i0
    ceph.OMG0, ceph.omg, ceph.M0 = eph.OMG0, eph.omg, eph.M0
    ceph.deln, ceph.OMGd, ceph.idot = eph.deln, eph.OMGd, eph.idot
    ceph.crc, ceph.crs = eph.crc, eph.crs
    ceph.cuc, ceph.cus = eph.cuc, eph.cus
    ceph.cic, ceph.cis = eph.cic, eph.cis
    ceph.iode, ceph.iodc = eph.iode, eph.iodc
    ceph.sva, ceph.svh = eph.sva, eph.svh
    ceph.tgd = eph.tgd[0]
    if len(eph.tgd) > 1:
        ceph.tgd_b = eph.tgd[1]
    return ceph


def eph2pos(time: float, eph: EphemerisRecord
            ) -> Optional[Tuple[np.ndarray, float, float]]:
    """
    Satellite position and clock bias from a legacy broadcast ephemeris.

    Parameters
    ----------
    time : float
        Evaluation time (GPST seconds)
    eph : EphemerisRecord
        GPS/QZSS LNAV, Galileo or BeiDou D1/D2 ephemeris

    Returns
    -------
    tuple or None
        ``(rs, dts, var)``: ECEF position (m), clock bias (s) and variance (m^2),
        None for an ephemeris without a semi-major axis
    """
    if eph.A <= 0.0:
        return None
    rs, dts = cssrlib.ephemeris.eph2pos(to_gtime(time), to_cssrlib_eph(eph))
    return np.asarray(rs, dtype=float), float(dts), var_uraeph(eph.sva)
