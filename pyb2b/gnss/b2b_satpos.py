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

"""
Satellite position, velocity and clock with PPP-B2b corrections.

The broadcast ephemeris selected by the IODN of the Type-2 orbit correction
is evaluated first. The orbit correction, given along the radial, along-track
and cross-track axes, is then subtracted from the broadcast position and the
Type-4 clock correction C0 from the broadcast clock:

    rs  = rs_brdc - (er*dR + ea*dA + ec*dC)
    dts = dts_brdc - C0 / c

Whenever the corrections of a satellite are missing, stale or inconsistent
the broadcast state is returned instead, flagged with ``ok=False`` and
``svh=-1``.
"""

import logging
from typing import Callable, List, NamedTuple, Optional, Sequence

import numpy as np

from ..core.constants import (CLIGHT, CLK_LIMIT, CLK_NODATA, NODATA_TOL,
                              ORB_ALONG_NODATA, ORB_RADIAL_NODATA, SYS_BDS,
                              SYS_GAL, SYS_GPS, SYS_QZS, sat2id, sat2sys)
from ..core.data_structures import EphemerisRecord, EphemerisStore, NavFormat
from ..core.options import DEFAULT_OPTIONS, B2bOptions
from ..satellite import legacy
from ..satellite.kepler import eph2pos_cnav
from ..ssr.corrections import CorrectionRecord, CorrectionState

logger = logging.getLogger(__name__)

AntennaOffset = Callable[[float, np.ndarray, int], np.ndarray]


class SatelliteState(NamedTuple):
    """Result of a satellite state evaluation.

    Attributes
    ----------
    ok : bool
        True when the requested computation succeeded
    rs : np.ndarray
        Position and velocity (m, m/s), shape (6,)
    dts : np.ndarray
        Clock bias and drift (s, s/s), shape (2,)
    var : float
        Position and clock error variance (m^2)
    svh : int
        Satellite health, -1 when unknown
    """
    ok: bool
    rs: np.ndarray
    dts: np.ndarray
    var: float
    svh: int


def _unavailable() -> SatelliteState:
    return SatelliteState(False, np.zeros(6), np.zeros(2), 0.0, -1)


def var_ura_b2b(ura_class: int, ura_value: int) -> float:
    """Variance (m^2) of a B2b URA class/value pair"""
    ura = (3.0 ** ura_class * (1.0 + 0.25 * ura_value) - 1.0) * 1E-3
    return ura * ura


def max_dtoe(sys: int, opt: B2bOptions = DEFAULT_OPTIONS) -> float:
    """Maximum |toe - t| of an ephemeris of a system (s)"""
    if sys == SYS_QZS:
        return opt.maxdtoe_qzs + 1.0
    if sys == SYS_GAL:
        return opt.maxdtoe_gal + 1.0
    if sys == SYS_BDS:
        return opt.maxdtoe_cmp + 1.0
    return opt.maxdtoe + 1.0


def select_b2b_eph(time: float, sat: int, iodn: int, nav: EphemerisStore,
                   opt: B2bOptions = DEFAULT_OPTIONS,
                   nav_format: Optional[NavFormat] = None) -> Optional[EphemerisRecord]:
    """
    Select the ephemeris a correction refers to.

    Parameters
    ----------
    time : float
        Ephemeris reference time (GPST seconds)
    sat : int
        Satellite number
    iodn : int
        IODC the correction was computed for; negative selects the
        ephemeris nearest in time
    nav : EphemerisStore
        Broadcast ephemerides
    nav_format : NavFormat, optional
        Restrict the search to one record layout

    Returns
    -------
    EphemerisRecord or None
    """
    tmax = max_dtoe(sat2sys(sat), opt)
    if nav_format is None:
        return nav.select(time, sat, iodn, tmax)

    subset = EphemerisStore([eph for eph in nav if eph.nav_format == nav_format])
    return subset.select(time, sat, iodn, tmax)


def _evaluate(time, eph, evaluator, dt) -> SatelliteState:
    """Position/clock at time and time+dt, velocity/drift by difference"""
    r0 = evaluator(time, eph)
    r1 = evaluator(time + dt, eph)
    if r0 is None or r1 is None:
        return _unavailable()

    rs = np.zeros(6)
    rs[:3] = r0[0]
    rs[3:] = (r1[0] - r0[0]) / dt
    dts = np.array([r0[1], (r1[1] - r0[1]) / dt])
    return SatelliteState(True, rs, dts, r0[2], eph.svh)


def _broadcast_evaluator(eph: EphemerisRecord):
    if eph.nav_format == NavFormat.MODERNIZED:
        return eph2pos_cnav
    return legacy.eph2pos


def ephpos(time: float, teph: float, sat: int, nav: EphemerisStore, iode: int = -1,
           opt: B2bOptions = DEFAULT_OPTIONS) -> SatelliteState:
    """
    Broadcast satellite state without B2b corrections.

    Uses the Kepler propagator for modernized records and cssrlib for
    legacy ones.
    """
    eph = select_b2b_eph(teph, sat, iode, nav, opt)
    if eph is None:
        logger.debug("no broadcast ephemeris sat=%s", sat2id(sat))
        return _unavailable()
    return _evaluate(time, eph, _broadcast_evaluator(eph), opt.dt_vel)


def _ephpos_b2b(time, teph, sat, nav, iode, opt):
    sys = sat2sys(sat)
    if sys == SYS_BDS:
        nav_format = NavFormat.MODERNIZED if iode >= 0 else None
        evaluator = eph2pos_cnav
    elif sys in (SYS_GPS, SYS_GAL, SYS_QZS):
        nav_format = None
        evaluator = legacy.eph2pos
    else:
        return None, _unavailable()

    eph = select_b2b_eph(teph, sat, iode, nav, opt, nav_format)
    if eph is None:
        return None, _unavailable()
    return eph, _evaluate(time, eph, evaluator, opt.dt_vel)


def ephpos_b2b(time: float, teph: float, sat: int, nav: EphemerisStore, iode: int = -1,
               opt: B2bOptions = DEFAULT_OPTIONS) -> SatelliteState:
    """
    Broadcast satellite state from the ephemeris a B2b correction refers to.

    BeiDou satellites are propagated with the Kepler propagator (B-CNAV
    records when ``iode`` is given), GPS/Galileo/QZSS with the legacy
    evaluator. Velocity and clock drift come from a second evaluation
    ``opt.dt_vel`` seconds later. GLONASS is not supported.

    Parameters
    ----------
    time : float
        Signal transmission time (GPST seconds)
    teph : float
        Time used to select the ephemeris
    sat : int
        Satellite number
    nav : EphemerisStore
        Broadcast ephemerides
    iode : int
        IODN of the orbit correction, negative for the nearest ephemeris

    Returns
    -------
    SatelliteState
    """
    return _ephpos_b2b(time, teph, sat, nav, iode, opt)[1]


def _fallback(time, teph, sat, nav, opt, reason) -> SatelliteState:
    logger.debug("sat=%s: %s, broadcast ephemeris used", sat2id(sat), reason)
    st = ephpos(time, teph, sat, nav, -1, opt)
    return SatelliteState(False, st.rs, st.dts, st.var, -1)


def _find_record(corrections: CorrectionState, sat: int):
    """Correction record whose clock belongs to its mask generation"""
    record = corrections.current.get(sat)
    if record is None:
        return None, "not in satellite mask"
    if record.clock.iodp == record.mask.iodp:
        return record, None

    record = corrections.previous.get(sat)
    if record is None:
        return None, "IODP mismatch and not in previous mask"
    if record.clock.iodp != record.mask.iodp:
        return None, "IODP mismatch"
    return record, None


def _check_record(record: CorrectionRecord, time: float, opt: B2bOptions):
    mask, orbit, clock = record.mask, record.orbit, record.clock
    if mask.iod_ssr != orbit.iod_ssr and mask.iod_ssr != clock.iod_ssr:
        return "IODSSR mismatch"
    if orbit.iod_corr != clock.iod_corr:
        return "IODCorr mismatch"
    if abs(time - orbit.t0) > opt.maxage_orbit:
        return f"orbit correction age {time - orbit.t0:.1f} s"
    if abs(time - clock.t0) > opt.maxage_clock:
        return f"clock correction age {time - clock.t0:.1f} s"
    return None


def _is_nodata(value: float, *magnitudes: float) -> bool:
    return any(abs(abs(value) - m) < NODATA_TOL for m in magnitudes)


def _unit(v: np.ndarray) -> Optional[np.ndarray]:
    norm = np.linalg.norm(v)
    if norm <= 0.0:
        return None
    return v / norm


def satpos_b2b(time: float, teph: float, sat: int, nav: EphemerisStore,
               corrections: CorrectionState, opt: B2bOptions = DEFAULT_OPTIONS,
               antenna_offset: Optional[AntennaOffset] = None) -> SatelliteState:
    """
    Satellite state corrected with PPP-B2b orbit and clock corrections.

    Parameters
    ----------
    time : float
        Signal transmission time (GPST seconds)
    teph : float
        Time used to select the ephemeris
    sat : int
        Satellite number
    nav : EphemerisStore
        Broadcast ephemerides
    corrections : CorrectionState
        Current and previous B2b correction epochs
    opt : B2bOptions
        Age limits and ephemeris selection windows
    antenna_offset : callable, optional
        ``antenna_offset(time, rs, sat)`` returning the satellite antenna
        phase center offset (ECEF, m) added to the corrected position

    Returns
    -------
    SatelliteState
        ``ok=True`` with the corrected state, or ``ok=False`` and ``svh=-1``
        with the uncorrected broadcast state
    """
    record, reason = _find_record(corrections, sat)
    if record is None:
        return _fallback(time, teph, sat, nav, opt, reason)

    reason = _check_record(record, time, opt)
    if reason is not None:
        return _fallback(time, teph, sat, nav, opt, reason)

    orbit, clock = record.orbit, record.clock
    eph, st = _ephpos_b2b(time, teph, sat, nav, orbit.iodn, opt)
    if not st.ok:
        return _fallback(time, teph, sat, nav, opt, f"no ephemeris for IODN={orbit.iodn}")

    rs = st.rs.copy()
    pos, vel = rs[:3], rs[3:]

    # broadcast clock with relativity from the state vector
    tk = time - eph.toc
    dts = np.array([eph.f0 + eph.f1 * tk + eph.f2 * tk * tk,
                    eph.f1 + 2.0 * eph.f2 * tk])
    dts[0] -= 2.0 * np.dot(pos, vel) / CLIGHT ** 2

    ea = _unit(vel)
    ec = _unit(np.cross(pos, vel))
    if ea is None or ec is None:
        return _fallback(time, teph, sat, nav, opt, "degenerate orbit frame")
    er = np.cross(ea, ec)

    dant = np.zeros(3)
    if antenna_offset is not None:
        dant = np.asarray(antenna_offset(time, pos.copy(), sat), dtype=float)

    dr, da, dc = orbit.orb_corr
    if _is_nodata(dr, ORB_RADIAL_NODATA):
        dr = 0.0
    if _is_nodata(da, ORB_ALONG_NODATA):
        da = 0.0
    if _is_nodata(dc, ORB_ALONG_NODATA):
        dc = 0.0
    rs[:3] = pos - (er * dr + ea * da + ec * dc) + dant

    c0 = clock.c0
    if _is_nodata(c0, CLK_NODATA, CLK_LIMIT):
        c0 = 0.0
    dts[0] -= c0 / CLIGHT

    return SatelliteState(True, rs, dts, var_ura_b2b(orbit.ura_class, orbit.ura_value), st.svh)


def satposs_b2b(time: float, sats: Sequence[int], nav: EphemerisStore,
                corrections: CorrectionState, opt: B2bOptions = DEFAULT_OPTIONS,
                antenna_offset: Optional[AntennaOffset] = None):
    """
    Corrected states of several satellites at one time.

    Returns
    -------
    rs : np.ndarray
        Positions and velocities, shape (n, 6)
    dts : np.ndarray
        Clock biases and drifts, shape (n, 2)
    var : np.ndarray
        Variances, shape (n,)
    svh : np.ndarray
        Health flags, shape (n,)
    ok : np.ndarray
        Correction success flags, shape (n,)
    """
    n = len(sats)
    rs = np.zeros((n, 6))
    dts = np.zeros((n, 2))
    var = np.zeros(n)
    svh = np.zeros(n, dtype=int)
    ok = np.zeros(n, dtype=bool)

    for k, sat in enumerate(sats):
        st = satpos_b2b(time, time, sat, nav, corrections, opt, antenna_offset)
        rs[k], dts[k], var[k], svh[k], ok[k] = st.rs, st.dts, st.var, st.svh, st.ok

    return rs, dts, var, svh, ok
