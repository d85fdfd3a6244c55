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

"""Keplerian orbit propagation for broadcast ephemerides.

Implements the GPS/Galileo/BeiDou user algorithm including the modernized
B-CNAV terms (semi-major axis rate and mean motion rate) and the BeiDou GEO
coordinate transformation (BDS ICD, PRN 1-5).
"""

import logging
from typing import Optional, Tuple

import numpy as np

from ..core.constants import (CLIGHT, COS_5, HALF_WEEK, MAX_ITER_KEPLER,
                              MU_BDS, MU_GAL, MU_GPS, OMGE, OMGE_BDS, OMGE_GAL,
                              RTOL_KEPLER, SIN_5, SYS_BDS, SYS_GAL, WEEK_SECONDS,
                              sat2id, sat2prn, sat2sys)
from ..core.data_structures import EphemerisRecord
from ..core.time import timediff
from .ephemeris import var_uraeph

logger = logging.getLogger(__name__)


def system_constants(sys: int) -> Tuple[float, float]:
    """Gravitational constant and earth rotation rate of a system"""
    if sys == SYS_GAL:
        return MU_GAL, OMGE_GAL
    if sys == SYS_BDS:
        return MU_BDS, OMGE_BDS
    return MU_GPS, OMGE


def solve_kepler(M: float, e: float) -> Optional[Tuple[float, int]]:
    """
    Solve Kepler's equation E - e*sin(E) = M by Newton iteration.

    Parameters
    ----------
    M : float
        Mean anomaly (rad)
    e : float
        Eccentricity

    Returns
    -------
    tuple of (float, int) or None
        Eccentric anomaly and number of iterations, None if the iteration did
        not reach RTOL_KEPLER within MAX_ITER_KEPLER steps
    """
    E = M
    Ek = 0.0
    n = 0
    while abs(E - Ek) > RTOL_KEPLER and n < MAX_ITER_KEPLER:
        Ek = E
        E -= (E - e * np.sin(E) - M) / (1.0 - e * np.cos(E))
        n += 1
    if n >= MAX_ITER_KEPLER:
        return None
    return E, n


def eph2pos_cnav(time: float, eph: EphemerisRecord
                 ) -> Optional[Tuple[np.ndarray, float, float]]:
    """
    Satellite position and clock bias from a broadcast ephemeris.

    Parameters
    ----------
    time : float
        Evaluation time (GPST seconds)
    eph : EphemerisRecord
        Ephemeris; ``dotA``/``dotn`` are zero for legacy records

    Returns
    -------
    tuple or None
        ``(rs, dts, var)``: ECEF position (m), clock bias (s) and position
        variance (m^2). None for an ephemeris without a semi-major axis or
        when Kepler's equation does not converge, the state is then
        unavailable.
    """
    if eph.A <= 0.0:
        return None

    tk = timediff(time, eph.toe)
    if tk > HALF_WEEK:
        tk -= WEEK_SECONDS
    if tk < -HALF_WEEK:
        tk += WEEK_SECONDS

    Ak = eph.A + eph.dotA * tk

    sys = sat2sys(eph.sat)
    prn = sat2prn(eph.sat)
    mu, omge = system_constants(sys)

    n0 = np.sqrt(mu / (eph.A * eph.A * eph.A))
    M = eph.M0 + (n0 + eph.deln + eph.dotn * tk / 2.0) * tk

    result = solve_kepler(M, eph.e)
    if result is None:
        logger.warning("kepler iteration overflow sat=%s", sat2id(eph.sat))
        return None
    E = result[0]

    sinE = np.sin(E)
    cosE = np.cos(E)

    u = np.arctan2(np.sqrt(1.0 - eph.e * eph.e) * sinE, cosE - eph.e) + eph.omg
    r = Ak * (1.0 - eph.e * cosE)
    i = eph.i0 + eph.idot * tk
    sin2u = np.sin(2.0 * u)
    cos2u = np.cos(2.0 * u)

    u += eph.cus * sin2u + eph.cuc * cos2u
    r += eph.crs * sin2u + eph.crc * cos2u
    i += eph.cis * sin2u + eph.cic * cos2u

    x = r * np.cos(u)
    y = r * np.sin(u)
    cosi = np.cos(i)

    rs = np.zeros(3)
    if sys == SYS_BDS and prn <= 5:
        # GEO: node without earth rotation, then -5 deg tilt and rotation by omge*tk
        O = eph.OMG0 + eph.OMGd * tk - omge * eph.toes
        sinO, cosO = np.sin(O), np.cos(O)
        xg = x * cosO - y * cosi * sinO
        yg = x * sinO + y * cosi * cosO
        zg = y * np.sin(i)
        sino = np.sin(omge * tk)
        coso = np.cos(omge * tk)
        rs[0] = xg * coso + yg * sino * COS_5 + zg * sino * SIN_5
        rs[1] = -xg * sino + yg * coso * COS_5 + zg * coso * SIN_5
        rs[2] = -yg * SIN_5 + zg * COS_5
    else:
        O = eph.OMG0 + (eph.OMGd - omge) * tk - omge * eph.toes
        sinO, cosO = np.sin(O), np.cos(O)
        rs[0] = x * cosO - y * cosi * sinO
        rs[1] = x * sinO + y * cosi * cosO
        rs[2] = y * np.sin(i)

    tk = timediff(time, eph.toc)
    dts = eph.f0 + eph.f1 * tk + eph.f2 * tk * tk

    # relativity correction
    dts -= 2.0 * np.sqrt(mu * eph.A) * eph.e * sinE / CLIGHT ** 2

    return rs, float(dts), var_uraeph(eph.sva)
