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

"""GNSS constants, tracking codes and B2b message limits"""

# Physical Constants
CLIGHT = 299792458.0  # speed of light (m/s)

# GPS frequencies
FREQ_L1 = 1.57542E9   # L1 frequency (Hz)
FREQ_L2 = 1.22760E9   # L2 frequency (Hz)
FREQ_L5 = 1.17645E9   # L5 frequency (Hz)

# GLONASS frequencies
FREQ_G1 = 1.60200E9   # GLONASS G1 base frequency (Hz)
FREQ_G2 = 1.24600E9   # GLONASS G2 base frequency (Hz)
FREQ_G3 = 1.202025E9  # GLONASS G3 frequency (Hz)
FREQ_G1a = 1.600995E9  # GLONASS G1a frequency (Hz)
FREQ_G2a = 1.248060E9  # GLONASS G2a frequency (Hz)
DFREQ_G1 = 0.56250E6  # GLONASS G1 channel spacing (Hz)
DFREQ_G2 = 0.43750E6  # GLONASS G2 channel spacing (Hz)

# Galileo frequencies
FREQ_E1 = 1.57542E9   # E1 frequency (Hz) - same as GPS L1
FREQ_E5a = 1.17645E9  # E5a frequency (Hz) - same as GPS L5
FREQ_E5b = 1.20714E9  # E5b frequency (Hz)
FREQ_E5 = 1.191795E9  # E5 (E5a+E5b) frequency (Hz)
FREQ_E6 = 1.27875E9   # E6 frequency (Hz)

# BeiDou frequencies
FREQ_B1I = 1.561098E9  # BeiDou B1I frequency (Hz)
FREQ_B1C = 1.57542E9   # BeiDou B1C frequency (Hz) - same as GPS L1
FREQ_B2a = 1.17645E9   # BeiDou B2a frequency (Hz) - same as GPS L5
FREQ_B2b = 1.20714E9   # BeiDou B2b frequency (Hz) - same as Galileo E5b
FREQ_B2 = 1.191795E9   # BeiDou B2 (B2a+B2b) frequency (Hz)
FREQ_B3 = 1.26852E9    # BeiDou B3 frequency (Hz)

# QZSS frequencies (same as GPS)
FREQ_J1 = FREQ_L1      # QZSS L1 frequency (Hz)
FREQ_J2 = FREQ_L2      # QZSS L2 frequency (Hz)
FREQ_J5 = FREQ_L5      # QZSS L5 frequency (Hz)
FREQ_J6 = 1.27875E9    # QZSS L6 frequency (Hz)

# GNSS System IDs
SYS_NONE = 0x00   # invalid
SYS_GPS = 0x01    # GPS
SYS_GLO = 0x02    # GLONASS
SYS_GAL = 0x04    # Galileo
SYS_BDS = 0x08    # BeiDou
SYS_QZS = 0x10    # QZSS

# Time System Parameters
GPST0 = [1980, 1, 6, 0, 0, 0]  # GPS time reference epoch
GPS_BDS_OFFSET = 14.0          # GPS-BeiDou time offset (seconds)
BDT_WEEK_OFFSET = 1356         # GPS week of BDT week 0
WEEK_SECONDS = 604800.0        # seconds per week
HALF_WEEK = 302400.0           # half a week (s)

# Earth Parameters (WGS84)
OMGE = 7.2921151467E-5         # earth angular velocity (rad/s)

# System-specific gravitational constants
MU_GPS = 3.9860050E14          # GPS gravitational constant
MU_GAL = 3.986004418E14        # Galileo gravitational constant
MU_BDS = 3.986004418E14        # BeiDou gravitational constant

# System-specific earth angular velocities
OMGE_GAL = 7.2921151467E-5     # Galileo earth angular velocity
OMGE_BDS = 7.292115E-5         # BeiDou earth angular velocity

# BeiDou GEO frame rotation (-5 deg about the x axis)
SIN_5 = -0.0871557427476582    # sin(-5.0 deg)
COS_5 = 0.9961946980917456     # cos(-5.0 deg)

# Kepler equation solver
RTOL_KEPLER = 1E-13            # relative tolerance
MAX_ITER_KEPLER = 30           # max number of iterations

# ============================================================================
# PPP-B2b MESSAGE LAYOUT
# ============================================================================
MASK_BDS = 63                  # BDS slots in the Type-1 mask
MASK_GPS = 37                  # GPS slots
MASK_GAL = 37                  # Galileo slots
MASK_GLO = 37                  # GLONASS slots
MASK_NSAT = MASK_BDS + MASK_GPS + MASK_GAL + MASK_GLO
NMODE_SIGNAL = 16              # code bias tracking modes per satellite
MAX_CLOCK_COR = 23             # clock corrections per Type-4 line
MAX_CODE_BIAS = 9              # (mode, bias) pairs per Type-3 line

# Magnitudes of the "not broadcast" values (m)
ORB_RADIAL_NODATA = 26.2128
ORB_ALONG_NODATA = 26.208
CLK_NODATA = 26.2128
CLK_LIMIT = 27.0
NODATA_TOL = 1E-6

# Observation codes (RTKLIB numbering)
CODE_NONE = 0       # none or unknown
CODE_L1C = 1
CODE_L1P = 2
CODE_L1W = 3
CODE_L1Y = 4
CODE_L1M = 5
CODE_L1N = 6
CODE_L1S = 7
CODE_L1L = 8
CODE_L1E = 9
CODE_L1A = 10
CODE_L1B = 11
CODE_L1X = 12
CODE_L1Z = 13
CODE_L2C = 14
CODE_L2D = 15
CODE_L2S = 16
CODE_L2L = 17
CODE_L2X = 18
CODE_L2P = 19
CODE_L2W = 20
CODE_L2Y = 21
CODE_L2M = 22
CODE_L2N = 23
CODE_L5I = 24
CODE_L5Q = 25
CODE_L5X = 26
CODE_L7I = 27
CODE_L7Q = 28
CODE_L7X = 29
CODE_L6A = 30
CODE_L6B = 31
CODE_L6C = 32
CODE_L6X = 33
CODE_L6Z = 34
CODE_L6S = 35
CODE_L6L = 36
CODE_L8I = 37
CODE_L8Q = 38
CODE_L8X = 39
CODE_L2I = 40
CODE_L2Q = 41
CODE_L6I = 42
CODE_L6Q = 43
CODE_L3I = 44
CODE_L3Q = 45
CODE_L3X = 46
CODE_L1I = 47
CODE_L1Q = 48
CODE_L5A = 49
CODE_L5B = 50
CODE_L5C = 51
CODE_L9A = 52
CODE_L9B = 53
CODE_L9C = 54
CODE_L9X = 55
CODE_L1D = 56
CODE_L5D = 57
CODE_L5P = 58
CODE_L5Z = 59
CODE_L6E = 60
CODE_L7D = 61
CODE_L7P = 62
CODE_L7Z = 63
CODE_L8D = 64
CODE_L8P = 65
CODE_L4A = 66
CODE_L4B = 67
CODE_L4X = 68
MAXCODE = 68

OBS_CODES = (
    '',
    '1C', '1P', '1W', '1Y', '1M', '1N', '1S', '1L', '1E', '1A',
    '1B', '1X', '1Z', '2C', '2D', '2S', '2L', '2X', '2P', '2W',
    '2Y', '2M', '2N', '5I', '5Q', '5X', '7I', '7Q', '7X', '6A',
    '6B', '6C', '6X', '6Z', '6S', '6L', '8I', '8Q', '8X', '2I',
    '2Q', '6I', '6Q', '3I', '3Q', '3X', '1I', '1Q', '5A', '5B',
    '5C', '9A', '9B', '9C', '9X', '1D', '5D', '5P', '5Z', '6E',
    '7D', '7P', '7Z', '8D', '8P', '4A', '4B', '4X',
)


def obs2code(obs):
    """Convert a two-character observation code ('1C', '5Q', ...) to CODE_*"""
    try:
        return OBS_CODES.index(obs, 1)
    except ValueError:
        return CODE_NONE


def code2obs(code):
    """Convert CODE_* to its two-character observation code"""
    if code <= CODE_NONE or code > MAXCODE:
        return ''
    return OBS_CODES[code]


# Satellite system functions
def sat2sys(sat):
    """Get satellite system from satellite number

    Uses the internal numbering of satellite_numbering.py
    """
    from .satellite_numbering import SATELLITE_RANGES

    for sys_id, (start, end) in SATELLITE_RANGES.items():
        if start <= sat <= end:
            return sys_id

    return SYS_NONE


def sat2prn(sat):
    """Get PRN number from satellite number"""
    from .satellite_numbering import sat_to_prn
    return sat_to_prn(sat)


def prn2sat(prn, sys):
    """Get satellite number from PRN and system

    Parameters:
    -----------
    prn : int
        PRN number
    sys : int
        Satellite system (SYS_GPS, SYS_BDS, etc.)

    Returns:
    --------
    int
        Satellite number, 0 if the PRN is out of range
    """
    from .satellite_numbering import SYS_TO_CHAR, prn_to_sat

    sys_char = SYS_TO_CHAR.get(sys, None)
    if sys_char is None:
        return 0

    return prn_to_sat(sys_char, prn)


def sys2char(sys):
    """Convert system ID to character"""
    from .satellite_numbering import SYS_TO_CHAR
    return SYS_TO_CHAR.get(sys, ' ')


def char2sys(c):
    """Convert character to system ID"""
    from .satellite_numbering import CHAR_TO_SYS
    return CHAR_TO_SYS.get(c.upper(), SYS_NONE)


def sat2id(sat):
    """Satellite number to RINEX id ('C23', 'G05', ...)"""
    sys = sat2sys(sat)
    if sys == SYS_NONE:
        return ''
    return f"{sys2char(sys)}{sat2prn(sat):02d}"


def id2sat(satid):
    """RINEX satellite id to satellite number, 0 when not recognised"""
    satid = satid.strip()
    if len(satid) < 2:
        return 0
    try:
        prn = int(satid[1:])
    except ValueError:
        return 0
    return prn2sat(prn, char2sys(satid[0]))
