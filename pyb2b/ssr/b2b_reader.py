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

"""Resumable readers of decoded PPP-B2b message streams.

Each message type comes as its own text file, one record per line, with
whitespace separated fields:

Type 1 (mask, 10 fields)::

    Week Sow Tod SSRGap IODSSR IODP BDSmask GPSmask GALmask GLOmask

Type 2 (orbit, 14 fields)::

    SatSlot1 Week Sow Tod SSRGap IODSSR IODN SatSlot IODCorr R A C URAclass URAvalue

Type 3 (code bias, 8 + 2 per mode, at least 24 fields)::

    SatSlot Week Sow Tod SSRGap IODSSR SatSlot1 CodeNum (Mode Bias)...

Type 4 (clock, 57 fields)::

    SubType Week Sow Tod SSRGap IODSSR IODP SubType SatNum (IODCorr C0)x23 Week1 Sow1

Week/Sow are BDT; a record is consumed once its epoch is no later than the
requested observation time plus DTTOL. A record further ahead stays in the
stream and the returned :class:`StreamCursor` points at its first byte, so
the next call resumes there.
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Callable, List, Optional

from ..core.constants import (CLK_LIMIT, MAX_CLOCK_COR, MAX_CODE_BIAS,
                              NMODE_SIGNAL, NODATA_TOL, ORB_ALONG_NODATA,
                              ORB_RADIAL_NODATA, sat2id)
from ..core.options import DEFAULT_OPTIONS, B2bOptions
from ..core.time import bdt2time, timediff
from .corrections import (BiasRecord, ClockRecord, CorrectionState,
                          OrbitRecord, SlotMask, slot2sat)

logger = logging.getLogger(__name__)


class B2bMessageType(IntEnum):
    MASK = 1
    ORBIT = 2
    CODE_BIAS = 3
    CLOCK = 4


# minimum number of fields of a record
FIELD_COUNTS = {
    B2bMessageType.MASK: 10,
    B2bMessageType.ORBIT: 14,
    B2bMessageType.CODE_BIAS: 24,
    B2bMessageType.CLOCK: 57,
}

_SEC_DAY = 86400

# position of the BDT week field, seconds of week follows it
_WEEK_FIELD = {
    B2bMessageType.MASK: 0,
    B2bMessageType.ORBIT: 1,
    B2bMessageType.CODE_BIAS: 1,
    B2bMessageType.CLOCK: 1,
}


@dataclass(frozen=True)
class StreamCursor:
    """Byte offset where the next read of a stream starts"""
    offset: int = 0


def b2b_time(week: int, sow: int) -> float:
    """Epoch of a record from its BDT week and seconds of week"""
    return bdt2time(week, sow + 14)


def b2b_reference_time(time: float, sow: int, tod: int) -> float:
    """Reference time of a correction from its BDT time of day

    ``tod`` refers to the BDT day of ``sow``, or to the day before when it
    lies after ``sow`` within the day.
    """
    t1 = (sow % _SEC_DAY) - tod
    if t1 < 0:
        t1 += _SEC_DAY
    return time - t1


def _exceeds(value: float, limit: float) -> bool:
    return abs(value) - limit > NODATA_TOL


def _read_stream(path, state: CorrectionState, obstime: float,
                 cursor: StreamCursor, msg_type: B2bMessageType,
                 merge: Callable[[List[str], float, CorrectionState], None],
                 opt: B2bOptions) -> StreamCursor:
    nfield = FIELD_COUNTS[msg_type]
    iweek = _WEEK_FIELD[msg_type]
    with open(path, 'rb') as fp:
        fp.seek(cursor.offset)
        while True:
            pos = fp.tell()
            line = fp.readline()
            if not line:
                return StreamCursor(pos)

            tokens = line.decode('ascii', errors='replace').split()
            if not tokens:
                continue
            if len(tokens) < nfield:
                logger.warning("B2b type %d: %d fields at offset %d, expected %d",
                               msg_type, len(tokens), pos, nfield)
                continue
            try:
                week, sow = int(tokens[iweek]), int(tokens[iweek + 1])
            except ValueError:
                logger.warning("B2b type %d: unreadable epoch at offset %d", msg_type, pos)
                continue

            time = b2b_time(week, sow)
            if timediff(time, obstime) > opt.dttol:
                return StreamCursor(pos)

            try:
                merge(tokens, time, state)
            except ValueError as e:
                logger.warning("B2b type %d: malformed record at offset %d: %s",
                               msg_type, pos, e)


def _merge_mask(tokens, time, state):
    sow, tod = int(tokens[1]), int(tokens[2])
    iod_ssr, iodp = int(tokens[4]), int(tokens[5])
    mask = SlotMask.from_bitstrings(*tokens[6:10])
    t0 = b2b_reference_time(time, sow, tod)

    if iodp != state.current.iodp:
        state.snapshot()
    state.current.apply_mask(mask, iodp, iod_ssr, t0, tod)
    logger.trace("mask IODP=%d: %d satellites", iodp, state.current.nsat)


def _merge_orbit(tokens, time, state):
    sow, tod = int(tokens[2]), int(tokens[3])
    iod_ssr, iodn, slot, iod_corr = (int(v) for v in tokens[5:9])
    corr = tuple(float(v) for v in tokens[9:12])
    ura_class, ura_value = int(tokens[12]), int(tokens[13])

    if not 0 <= slot <= 255:
        return
    sat = slot2sat(slot)
    record = state.current.get(sat)
    if record is None:
        logger.debug("orbit correction for slot %d not in mask", slot)
        return

    if not 0 <= iod_corr <= 7:
        logger.debug("orbit %s rejected: IODCorr=%d", sat2id(sat), iod_corr)
        return
    if _exceeds(corr[0], ORB_RADIAL_NODATA) or _exceeds(corr[1], ORB_ALONG_NODATA) \
            or _exceeds(corr[2], ORB_ALONG_NODATA):
        logger.debug("orbit %s rejected: correction %s out of range", sat2id(sat), corr)
        return
    if not (0 <= ura_class <= 7 and 0 <= ura_value <= 7):
        logger.debug("orbit %s rejected: URA class=%d value=%d",
                     sat2id(sat), ura_class, ura_value)
        return

    record.orbit = OrbitRecord(
        iodn=iodn, iod_corr=iod_corr, iod_ssr=iod_ssr,
        t0=b2b_reference_time(time, sow, tod), tod=tod,
        orb_corr=corr, ura_class=ura_class, ura_value=ura_value)


def _merge_code_bias(tokens, time, state):
    slot, sow, tod = int(tokens[0]), int(tokens[2]), int(tokens[3])
    iod_ssr, code_num = int(tokens[5]), int(tokens[7])
    npair = min(code_num, MAX_CODE_BIAS, (len(tokens) - 8) // 2)
    pairs = [(int(tokens[8 + 2 * k]), float(tokens[9 + 2 * k])) for k in range(npair)]

    if slot == 0:
        return
    sat = slot2sat(slot)
    record = state.current.get(sat)
    if record is None:
        logger.debug("code bias for slot %d not in mask", slot)
        return
    if not pairs:
        return

    dcb = list(record.bias.dcb)
    for mode, bias in pairs:
        if not 0 <= mode < NMODE_SIGNAL:
            logger.debug("code bias %s: tracking mode %d ignored", sat2id(sat), mode)
            continue
        dcb[mode] = bias

    record.bias = BiasRecord(iod_ssr=iod_ssr, t0=b2b_reference_time(time, sow, tod),
                             tod=tod, dcb=tuple(dcb))


def _merge_clock(tokens, time, state):
    sow, tod = int(tokens[2]), int(tokens[3])
    iod_ssr, iodp, subtype = (int(v) for v in tokens[5:8])
    entries = [(int(tokens[9 + 2 * k]), float(tokens[10 + 2 * k]))
               for k in range(MAX_CLOCK_COR)]

    if not (0 <= iod_ssr <= 3 and 0 <= iodp <= 15 and 0 <= subtype <= 31):
        logger.debug("clock record rejected: IODSSR=%d IODP=%d SubType=%d",
                     iod_ssr, iodp, subtype)
        return

    t0 = b2b_reference_time(time, sow, tod)
    epoch = state.current
    if iodp != epoch.iodp:
        # slots still resolve through the current mask
        logger.trace("clock IODP=%d against mask IODP=%d", iodp, epoch.iodp)
    for k, (iod_corr, c0) in enumerate(entries):
        sat = epoch.sat_at(subtype * MAX_CLOCK_COR + k)
        record = epoch.get(sat)
        if record is None:
            continue
        if not 0 <= iod_corr <= 7 or _exceeds(c0, CLK_LIMIT):
            logger.debug("clock %s rejected: IODCorr=%d C0=%.4f", sat2id(sat), iod_corr, c0)
            continue
        record.clock = ClockRecord(iodp=iodp, iod_ssr=iod_ssr, iod_corr=iod_corr,
                                   t0=t0, tod=tod, c0=c0)


_MERGE = {
    B2bMessageType.MASK: _merge_mask,
    B2bMessageType.ORBIT: _merge_orbit,
    B2bMessageType.CODE_BIAS: _merge_code_bias,
    B2bMessageType.CLOCK: _merge_clock,
}


def read_b2b(msg_type: B2bMessageType, path, state: CorrectionState, obstime: float,
             cursor: StreamCursor = StreamCursor(),
             opt: B2bOptions = DEFAULT_OPTIONS) -> StreamCursor:
    """
    Merge the records of one B2b stream up to an observation time.

    Parameters
    ----------
    msg_type : B2bMessageType
        Message type carried by the stream
    path : str or Path
        Stream file
    state : CorrectionState
        Corrections updated in place
    obstime : float
        Observation time (GPST seconds)
    cursor : StreamCursor
        Where to resume, the start of the file by default
    opt : B2bOptions
        Processing options (DTTOL)

    Returns
    -------
    StreamCursor
        Position of the first record not yet consumed, or end of file

    Raises
    ------
    OSError
        If the stream cannot be opened
    """
    if msg_type not in _MERGE:
        raise ValueError(f"Unknown B2b message type: {msg_type}")
    msg_type = B2bMessageType(msg_type)
    return _read_stream(path, state, obstime, cursor, msg_type, _MERGE[msg_type], opt)


def read_b2b_type1(path, state, obstime, cursor=StreamCursor(), opt=DEFAULT_OPTIONS):
    """Merge Type-1 satellite mask records up to obstime"""
    return read_b2b(B2bMessageType.MASK, path, state, obstime, cursor, opt)


def read_b2b_type2(path, state, obstime, cursor=StreamCursor(), opt=DEFAULT_OPTIONS):
    """Merge Type-2 orbit correction records up to obstime"""
    return read_b2b(B2bMessageType.ORBIT, path, state, obstime, cursor, opt)


def read_b2b_type3(path, state, obstime, cursor=StreamCursor(), opt=DEFAULT_OPTIONS):
    """Merge Type-3 code bias records up to obstime"""
    return read_b2b(B2bMessageType.CODE_BIAS, path, state, obstime, cursor, opt)


def read_b2b_type4(path, state, obstime, cursor=StreamCursor(), opt=DEFAULT_OPTIONS):
    """Merge Type-4 clock correction records up to obstime"""
    return read_b2b(B2bMessageType.CLOCK, path, state, obstime, cursor, opt)


class B2bStreamReader:
    """
    One B2b stream bound to a correction state.

    Keeps the cursor between calls so that repeated :meth:`advance` calls
    with increasing observation times read each record exactly once.
    """

    def __init__(self, msg_type: B2bMessageType, path, state: CorrectionState,
                 opt: B2bOptions = DEFAULT_OPTIONS):
        self.msg_type = B2bMessageType(msg_type)
        self.path = Path(path)
        self.state = state
        self.opt = opt
        self.cursor = StreamCursor()

    def advance(self, obstime: float) -> StreamCursor:
        self.cursor = read_b2b(self.msg_type, self.path, self.state, obstime,
                               self.cursor, self.opt)
        return self.cursor

    def rewind(self):
        self.cursor = StreamCursor()
