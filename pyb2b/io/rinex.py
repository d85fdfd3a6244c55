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

"""RINEX 4.0 navigation file reader.

Reads the broadcast ephemerides PPP-B2b corrections refer to: GPS/QZSS LNAV,
BeiDou D1/D2 and BeiDou CNV1/CNV2. ``STO``, ``ION`` and ``EOP`` records as
well as other ``EPH`` message types are recognised and skipped.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from ..core.constants import SYS_BDS, SYS_GPS, SYS_QZS, id2sat, sat2sys
from ..core.data_structures import EphemerisStore, NavFormat
from ..core.time import epoch2time
from ..satellite.ephemeris import NFIELDS, decode_ephemeris

logger = logging.getLogger(__name__)

# Continuation lines of records that are not decoded
_SKIP_LINES = {
    'STO': 2,
    'EOP': 3,
    'ION': 3,
}
_SKIP_LINES_ION_IFNV = 2

# EPH message types decoded per system
_EPH_FORMATS = {
    (SYS_GPS, 'LNAV'): NavFormat.LEGACY,
    (SYS_QZS, 'LNAV'): NavFormat.LEGACY,
    (SYS_BDS, 'D1'): NavFormat.LEGACY,
    (SYS_BDS, 'D2'): NavFormat.LEGACY,
    (SYS_BDS, 'CNV1'): NavFormat.MODERNIZED,
    (SYS_BDS, 'CNV2'): NavFormat.MODERNIZED,
}

# lines after a D1/D2 record header holding the BDT week, and its columns
_BDT_WEEK_LINE = 6
_BDT_WEEK_COLS = slice(42, 61)


class RinexVersionError(RuntimeError):
    """Navigation file is not RINEX 4 or lacks a version line"""


class RinexFormatError(ValueError):
    """Malformed navigation record"""


def _num(line: str, start: int, width: int = 19) -> float:
    field = line[start:start + width].strip()
    if not field:
        return 0.0
    return float(field.replace('D', 'E').replace('d', 'e'))


def scan_bdt_week(lines: List[str]) -> Optional[int]:
    """
    Find the BDT week number of the first BeiDou D1/D2 record.

    CNV1/CNV2 records carry no week number; the week broadcast in D1/D2
    records of the same file provides it.

    Returns
    -------
    int or None
        BDT week, or None when the file holds no D1/D2 record
    """
    for k, line in enumerate(lines):
        if not line.startswith('> EPH'):
            continue
        if 'D1' not in line and 'D2' not in line:
            continue
        if k + _BDT_WEEK_LINE >= len(lines):
            return None
        try:
            return int(_num(lines[k + _BDT_WEEK_LINE][_BDT_WEEK_COLS], 0))
        except ValueError:
            logger.warning("unreadable BDT week in record: %s", line.strip())
            return None
    return None


def _read_header(lines: List[str], nav: EphemerisStore) -> int:
    """Consume the header, returning the index of the first body line"""
    version = None
    for k, line in enumerate(lines):
        label = line[60:]
        if 'RINEX VERSION / TYPE' in label:
            version = _num(line, 0, 9)
            if version < 4.0:
                raise RinexVersionError(f"Unsupported RINEX version: {version}")
        elif 'LEAP SECONDS' in label:
            nav.leaps = int(_num(line, 0, 6))
        elif 'END OF HEADER' in label:
            if version is None:
                raise RinexVersionError("RINEX VERSION / TYPE line not found")
            return k + 1
    raise RinexVersionError("RINEX header not terminated")


def _read_record(lines: List[str], k: int, nfields: int
                 ) -> Tuple[Optional[float], List[float], int, bool]:
    """Collect the time tag and numeric fields of one EPH record

    An unreadable numeric field marks the record invalid, the remaining
    lines of the record are still consumed.
    """
    toc = None
    data: List[float] = []
    valid = True
    while k < len(lines) and len(data) < nfields:
        line = lines[k]
        k += 1
        if not line.strip():
            continue
        if toc is None:
            try:
                ep = [float(v) for v in line[4:23].split()]
                if len(ep) != 6:
                    raise ValueError(line[4:23])
                toc = epoch2time(ep)
            except ValueError:
                raise RinexFormatError(f"rinex nav toc error: {line[:23]}") from None
            start, count = 23, 3
        else:
            start, count = 4, 4
        try:
            values = [_num(line, start + 19 * j) for j in range(count)]
        except ValueError:
            valid = False
            values = [0.0] * count
        data.extend(values)
    return toc, data, k, valid


def read_rinex4_nav(filename, nav: Optional[EphemerisStore] = None) -> EphemerisStore:
    """
    Read a RINEX 4.0 navigation file.

    Parameters
    ----------
    filename : str or Path
        Navigation file
    nav : EphemerisStore, optional
        Store to append to, a new one is created when omitted

    Returns
    -------
    EphemerisStore
        Store holding every successfully decoded ephemeris

    Raises
    ------
    OSError
        If the file cannot be opened
    RinexVersionError
        If the file is not RINEX 4.0 or later
    RinexFormatError
        If an ephemeris time tag cannot be parsed
    """
    if nav is None:
        nav = EphemerisStore()

    with open(filename, 'r') as fp:
        lines = fp.read().splitlines()

    k = _read_header(lines, nav)
    bdt_week = scan_bdt_week(lines)
    nrec = 0

    while k < len(lines):
        line = lines[k]
        k += 1
        if not line.startswith('>'):
            continue
        tokens = line[1:].split()
        if not tokens:
            continue
        kind = tokens[0]

        if kind in _SKIP_LINES:
            if kind == 'ION' and 'IFNV' in line:
                k += _SKIP_LINES_ION_IFNV
            else:
                k += _SKIP_LINES[kind]
            continue
        if kind != 'EPH' or len(tokens) < 3:
            continue

        sat = id2sat(tokens[1])
        nav_format = _EPH_FORMATS.get((sat2sys(sat), tokens[2]))
        if nav_format is None:
            continue

        lineno = k
        toc, data, k, valid = _read_record(lines, k, NFIELDS[nav_format])
        if len(data) < NFIELDS[nav_format]:
            logger.warning("truncated %s record of %s at end of file", tokens[2], tokens[1])
            break
        if not valid:
            logger.warning("unreadable field in %s record of %s at line %d, skipped",
                           tokens[2], tokens[1], lineno)
            continue

        eph = decode_ephemeris(sat, toc, data, nav_format, bdt_week=bdt_week)
        if eph is not None:
            nav.add(eph)
            nrec += 1

    logger.info("%s: %d ephemerides read (BDT week %s)", Path(filename).name, nrec, bdt_week)
    return nav


class RinexNav4Reader:
    """One-shot reader of a RINEX 4.0 navigation file."""

    def __init__(self, filename):
        self.filename = Path(filename)

    def read(self, nav: Optional[EphemerisStore] = None) -> EphemerisStore:
        return read_rinex4_nav(self.filename, nav)
