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

"""Internal satellite numbering for pyb2b.

Every constellation a PPP-B2b mask can address gets a contiguous block of
internal satellite numbers, wide enough for all 37 GPS/Galileo/GLONASS and
63 BeiDou mask slots:

- GPS (G): 1-37
- GLONASS (R): 38-74
- Galileo (E): 75-111
- QZSS (J): 112-121
- BeiDou (C): 122-184
"""

# Define system IDs (duplicated from constants.py to avoid circular import)
SYS_NONE = 0x00
SYS_GPS = 0x01
SYS_GLO = 0x02
SYS_GAL = 0x04
SYS_BDS = 0x08
SYS_QZS = 0x10

# First and last internal satellite number of each system
SATELLITE_RANGES = {
    SYS_GPS: (1, 37),      # GPS: PRN 1-37
    SYS_GLO: (38, 74),     # GLONASS: PRN 1-37
    SYS_GAL: (75, 111),    # Galileo: PRN 1-37
    SYS_QZS: (112, 121),   # QZSS: PRN 1-10 (J01-J10)
    SYS_BDS: (122, 184),   # BeiDou: PRN 1-63
}

MAXSAT = 184

# System ID to character mapping
SYS_TO_CHAR = {
    SYS_GPS: 'G',
    SYS_GLO: 'R',
    SYS_GAL: 'E',
    SYS_BDS: 'C',
    SYS_QZS: 'J',
}

# Character to system ID mapping
CHAR_TO_SYS = {v: k for k, v in SYS_TO_CHAR.items()}


def prn_to_sat(system_char, prn):
    """Convert system character and PRN to internal satellite number.

    Parameters
    ----------
    system_char : str
        Single character system identifier ('G', 'R', 'E', 'C', 'J')
    prn : int
        PRN number within the constellation

    Returns
    -------
    int
        Internal satellite number, or 0 if invalid PRN or system

    Examples
    --------
    >>> prn_to_sat('G', 1)
    1
    >>> prn_to_sat('C', 1)
    122
    >>> prn_to_sat('X', 1)
    0
    """
    sys_id = CHAR_TO_SYS.get(system_char)
    if sys_id is None:
        return 0

    start, end = SATELLITE_RANGES[sys_id]
    if 1 <= prn <= end - start + 1:
        return start + prn - 1

    return 0  # Invalid


def sat_to_prn(sat):
    """Convert internal satellite number to constellation-specific PRN.

    Returns 0 for a satellite number outside every system block.

    Examples
    --------
    >>> sat_to_prn(1)
    1
    >>> sat_to_prn(123)
    2
    >>> sat_to_prn(999)
    0
    """
    for start, end in SATELLITE_RANGES.values():
        if start <= sat <= end:
            return sat - start + 1
    return 0
