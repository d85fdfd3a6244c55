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

"""Core data structures for broadcast ephemerides and observations"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple

import numpy as np

from .constants import SYS_NONE, sat2prn, sat2sys

NFREQ = 3  # frequencies carried per observation


class NavFormat(Enum):
    """Layout of a broadcast ephemeris record.

    Attributes
    ----------
    LEGACY : int
        GPS/QZSS LNAV and BeiDou D1/D2, 29 RINEX-4 numeric fields
    MODERNIZED : int
        BeiDou CNV1/CNV2 (B-CNAV), 39 RINEX-4 numeric fields
    """
    LEGACY = 1
    MODERNIZED = 2


@dataclass(frozen=True)
class EphemerisRecord:
    """Broadcast ephemeris of one satellite.

    Records are immutable once decoded. All epochs are GPS seconds; ``toes``
    keeps the raw time of week of ``toe`` in the satellite's own time system.

    Attributes
    ----------
    sat : int
        Satellite number (internal numbering)
    toc, toe, ttr : float
        Clock reference, ephemeris reference and transmission time (GPST)
    f0, f1, f2 : float
        Clock polynomial (s, s/s, s/s^2)
    A, e, i0, OMG0, omg, M0, deln, OMGd, idot : float
        Keplerian elements and their rates
    crc, crs, cuc, cus, cic, cis : float
        Harmonic correction coefficients
    dotA, dotn : float
        Semi-major axis rate and mean motion rate (modernized only)
    tgd : tuple of float
        Group delays, one to three terms depending on the format
    iode, iodc : int
        Issue of data (BeiDou AODE/AODC), both within [0, 1023]
    """
    sat: int
    toc: float = 0.0
    toe: float = 0.0
    ttr: float = 0.0
    toes: float = 0.0
    week: int = 0
    f0: float = 0.0
    f1: float = 0.0
    f2: float = 0.0
    A: float = 0.0
    e: float = 0.0
    i0: float = 0.0
    OMG0: float = 0.0
    omg: float = 0.0
    M0: float = 0.0
    deln: float = 0.0
    OMGd: float = 0.0
    idot: float = 0.0
    crc: float = 0.0
    crs: float = 0.0
    cuc: float = 0.0
    cus: float = 0.0
    cic: float = 0.0
    cis: float = 0.0
    dotA: float = 0.0
    dotn: float = 0.0
    sat_type: int = 0
    tgd: Tuple[float, ...] = (0.0,)
    iode: int = 0
    iodc: int = 0
    svh: int = 0
    sva: int = 0
    code: int = 0
    flag: int = 0
    fit: float = 0.0
    nav_format: NavFormat = NavFormat.LEGACY

    @property
    def system(self):
        return sat2sys(self.sat)

    @property
    def prn(self):
        return sat2prn(self.sat)


@dataclass
class EphemerisStore:
    """Append-only store of broadcast ephemerides.

    Duplicate records are tolerated; lookups prefer the best time match.

    Attributes
    ----------
    eph : list of EphemerisRecord
        Records in insertion order
    leaps : int
        GPS-UTC leap seconds from the navigation file header
    """
    eph: List[EphemerisRecord] = field(default_factory=list)
    leaps: int = 0

    def __len__(self):
        return len(self.eph)

    def __iter__(self) -> Iterator[EphemerisRecord]:
        return iter(self.eph)

    def add(self, eph: EphemerisRecord):
        """Append a decoded record"""
        self.eph.append(eph)

    def reset(self):
        """Drop all records"""
        self.eph.clear()
        self.leaps = 0

    def select(self, time: float, sat: int, iodn: int = -1,
               tmax: float = float('inf')) -> Optional[EphemerisRecord]:
        """Select an ephemeris for a satellite.

        Parameters
        ----------
        time : float
            Reference time (GPST seconds)
        sat : int
            Satellite number
        iodn : int
            Required IODC, or negative for "any"
        tmax : float
            Maximum |toe - time| accepted (s)

        Returns
        -------
        EphemerisRecord or None
            With ``iodn >= 0`` the first record with a matching IODC inside
            ``tmax``; otherwise the record with toe nearest to ``time``.
        """
        best = None
        tmin = tmax + 1.0
        for eph in self.eph:
            if eph.sat != sat:
                continue
            if iodn >= 0 and eph.iodc != iodn:
                continue
            dt = abs(eph.toe - time)
            if dt > tmax:
                continue
            if iodn >= 0:
                return eph
            if dt <= tmin:
                best = eph
                tmin = dt
        return best


@dataclass
class Observation:
    """GNSS observation data for a single satellite at a specific epoch.

    Attributes
    ----------
    time : float
        Reception time in GPS time (GPST) seconds
    sat : int
        Satellite number using internal satellite numbering system
    system : int
        Satellite system ID (determined from sat in __post_init__)
    P : np.ndarray
        Pseudorange measurements in meters, shape (NFREQ,)
    code : np.ndarray
        Code type indicators (CODE_*), shape (NFREQ,), dtype int
    """
    time: float                    # reception time (GPST)
    sat: int                       # satellite number
    system: int = SYS_NONE         # satellite system
    P: np.ndarray = field(default_factory=lambda: np.zeros(NFREQ))  # pseudorange (m)
    code: np.ndarray = field(default_factory=lambda: np.zeros(NFREQ, dtype=int))  # code indicator

    def __post_init__(self):
        self.system = sat2sys(self.sat)
        self.P = np.asarray(self.P, dtype=float)
        self.code = np.asarray(self.code, dtype=int)

    @property
    def prn(self):
        return sat2prn(self.sat)
