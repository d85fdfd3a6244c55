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

"""PPP-B2b correction model.

Corrections arrive in four independent message streams and are merged per
satellite into a :class:`CorrectionEpoch`. The epoch is organised by the
satellite mask of message Type 1: the mask defines which satellites exist,
in which order Type-4 clock entries address them, and the IODP every
orbit/clock correction must match.

Mask slots are numbered 1-174:

- BDS: 1-63 (PRN = slot)
- GPS: 64-100 (PRN = slot - 63)
- Galileo: 101-137 (PRN = slot - 100)
- GLONASS: 138-174 (PRN = slot - 137)
"""

import copy
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from ..core.constants import (MASK_BDS, MASK_GAL, MASK_GLO, MASK_GPS,
                              MASK_NSAT, NMODE_SIGNAL, SYS_BDS, SYS_GAL,
                              SYS_GLO, SYS_GPS, prn2sat, sat2prn, sat2sys)

# first slot of each system block and its system
_SLOT_BLOCKS = (
    (1, MASK_BDS, SYS_BDS),
    (MASK_BDS + 1, MASK_GPS, SYS_GPS),
    (MASK_BDS + MASK_GPS + 1, MASK_GAL, SYS_GAL),
    (MASK_BDS + MASK_GPS + MASK_GAL + 1, MASK_GLO, SYS_GLO),
)


def slot2sat(slot: int) -> int:
    """Mask slot number (1-174) to satellite number, 0 for no satellite"""
    for first, size, sys in _SLOT_BLOCKS:
        if first <= slot < first + size:
            return prn2sat(slot - first + 1, sys)
    return 0


def sat2slot(sat: int) -> int:
    """Satellite number to mask slot number, 0 for systems without slots"""
    sys = sat2sys(sat)
    prn = sat2prn(sat)
    for first, size, block_sys in _SLOT_BLOCKS:
        if sys == block_sys and 1 <= prn <= size:
            return first + prn - 1
    return 0


@dataclass
class SlotMask:
    """Active flag per mask slot, index 0 is slot 1"""

    active: List[bool] = field(default_factory=lambda: [False] * MASK_NSAT)

    @classmethod
    def from_bitstrings(cls, bds: str, gps: str, gal: str, glo: str) -> "SlotMask":
        """
        Build a mask from the per-system '0'/'1' strings of a Type-1 record.

        Strings shorter than their block are padded with '0', longer ones
        are truncated.
        """
        active = []
        for bits, (_, size, _) in zip((bds, gps, gal, glo), _SLOT_BLOCKS):
            bits = bits[:size].ljust(size, '0')
            active.extend(c == '1' for c in bits)
        return cls(active)

    def is_active(self, slot: int) -> bool:
        return 1 <= slot <= MASK_NSAT and self.active[slot - 1]

    def slots(self) -> List[int]:
        """Active slot numbers in ascending order"""
        return [k + 1 for k, on in enumerate(self.active) if on]

    def satellites(self) -> List[int]:
        """Satellite numbers of the active slots, in slot order"""
        return [slot2sat(slot) for slot in self.slots()]

    def __len__(self):
        return sum(self.active)


@dataclass(frozen=True)
class MaskRecord:
    """Type 1: mask generation a satellite belongs to"""
    iodp: int = -1
    iod_ssr: int = -1
    t0: float = 0.0       # reference time (GPST)
    tod: float = 0.0      # BDT time of day


@dataclass(frozen=True)
class OrbitRecord:
    """Type 2: orbit correction and URA"""
    iodn: int = -1
    iod_corr: int = -1
    iod_ssr: int = -1
    t0: float = 0.0
    tod: float = 0.0
    orb_corr: Tuple[float, float, float] = (0.0, 0.0, 0.0)  # radial, along, cross (m)
    ura_class: int = -1
    ura_value: int = -1


@dataclass(frozen=True)
class BiasRecord:
    """Type 3: code bias per tracking mode (m)

    Mode slots by system::

        mode  BDS       GPS          Galileo
        0     B1I       L1 C/A       -
        1     B1C(D)    L1 P         E1 B
        2     B1C(P)    -            E1 C
        4     B2a(D)    L1C(P)       E5a Q
        5     B2a(P)    L1C(D+P)     E5a I
        7     B2b-I     L2C(L)       E5b I
        8     B2b-Q     L2C(M+L)     E5b Q
        11    -         L5 I         E6 C
        12    B3 I      L5 Q         -
    """
    iod_ssr: int = -1
    t0: float = 0.0
    tod: float = 0.0
    dcb: Tuple[float, ...] = (0.0,) * NMODE_SIGNAL


@dataclass(frozen=True)
class ClockRecord:
    """Type 4: clock correction C0 (m)"""
    iodp: int = -1
    iod_ssr: int = -1
    iod_corr: int = -1
    t0: float = 0.0
    tod: float = 0.0
    c0: float = 0.0


@dataclass
class CorrectionRecord:
    """Latest correction of each message type for one satellite"""
    sat: int
    mask: MaskRecord = field(default_factory=MaskRecord)
    orbit: OrbitRecord = field(default_factory=OrbitRecord)
    bias: BiasRecord = field(default_factory=BiasRecord)
    clock: ClockRecord = field(default_factory=ClockRecord)


@dataclass(frozen=True)
class CorrectionStatus:
    """Which corrections have been received for a satellite"""
    mask: bool = False
    orbit: bool = False
    bias: bool = False
    clock: bool = False

    @property
    def complete(self) -> bool:
        return self.mask and self.orbit and self.clock


@dataclass
class CorrectionEpoch:
    """
    Corrections of one mask generation.

    Attributes
    ----------
    iodp : int
        IODP of the last Type-1 record merged, -1 before the first one
    mask : SlotMask
        Active satellites
    records : dict
        Satellite number to CorrectionRecord, in slot order
    """
    iodp: int = -1
    mask: SlotMask = field(default_factory=SlotMask)
    records: Dict[int, CorrectionRecord] = field(default_factory=dict)

    @property
    def nsat(self) -> int:
        return len(self.records)

    def __contains__(self, sat):
        return sat in self.records

    def __iter__(self) -> Iterator[CorrectionRecord]:
        return iter(self.records.values())

    def get(self, sat: int) -> Optional[CorrectionRecord]:
        return self.records.get(sat)

    def sat_at(self, index: int) -> int:
        """Satellite of the index-th (0-based) active mask slot, 0 if none"""
        slots = self.mask.slots()
        if 0 <= index < len(slots):
            return slot2sat(slots[index])
        return 0

    def apply_mask(self, mask: SlotMask, iodp: int, iod_ssr: int, t0: float, tod: float):
        """
        Install a new satellite mask.

        Satellites staying in the mask keep their orbit, bias and clock
        records; new ones start empty and dropped ones are removed.
        """
        records = {}
        mask_record = MaskRecord(iodp=iodp, iod_ssr=iod_ssr, t0=t0, tod=tod)
        for sat in mask.satellites():
            record = self.records.get(sat) or CorrectionRecord(sat)
            record.mask = mask_record
            records[sat] = record
        self.iodp = iodp
        self.mask = mask
        self.records = records

    def snapshot(self) -> "CorrectionEpoch":
        """Independent copy of the epoch"""
        return copy.deepcopy(self)


class CorrectionState:
    """
    Current and previous correction epochs.

    The previous epoch is a snapshot of the current one taken whenever a
    Type-1 record with a new IODP arrives, so that orbit/clock corrections
    still referring to the old mask generation stay usable.

    Instances are not thread-safe; one writer at a time.
    """

    def __init__(self):
        self.current = CorrectionEpoch()
        self.previous = CorrectionEpoch()

    def snapshot(self):
        """Copy the current epoch into the previous slot"""
        self.previous = self.current.snapshot()

    def reset(self):
        self.current = CorrectionEpoch()
        self.previous = CorrectionEpoch()

    def status(self, sat: int) -> CorrectionStatus:
        """Corrections received for a satellite in the current epoch"""
        record = self.current.get(sat)
        if record is None:
            return CorrectionStatus()
        return CorrectionStatus(
            mask=record.mask.iodp >= 0,
            orbit=record.orbit.iod_corr >= 0,
            bias=record.bias.iod_ssr >= 0,
            clock=record.clock.iod_corr >= 0,
        )

    def satellites(self) -> List[int]:
        return list(self.current.records)
