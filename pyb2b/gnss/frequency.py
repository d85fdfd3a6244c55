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
GNSS carrier frequencies by tracking code.

The band of an observation code is its first character ('1' for C1C, '5'
for C5Q, ...); its meaning depends on the constellation, e.g. band 2 is L2
for GPS but B1I for BeiDou.

Functions:
    code2freq: carrier frequency of an observation code for a system
    sat2freq: carrier frequency of an observation code for a satellite
"""

from ..core.constants import (DFREQ_G1, DFREQ_G2, FREQ_B1C, FREQ_B1I, FREQ_B2,
                              FREQ_B2a, FREQ_B2b, FREQ_B3, FREQ_E1, FREQ_E5,
                              FREQ_E5a, FREQ_E5b, FREQ_E6, FREQ_G1, FREQ_G1a,
                              FREQ_G2, FREQ_G2a, FREQ_G3, FREQ_J1, FREQ_J2,
                              FREQ_J5, FREQ_J6, FREQ_L1, FREQ_L2, FREQ_L5,
                              SYS_BDS, SYS_GAL, SYS_GLO, SYS_GPS, SYS_QZS,
                              code2obs, sat2sys)

_BAND_FREQ = {
    SYS_GPS: {'1': FREQ_L1, '2': FREQ_L2, '5': FREQ_L5},
    SYS_QZS: {'1': FREQ_J1, '2': FREQ_J2, '5': FREQ_J5, '6': FREQ_J6},
    SYS_GAL: {'1': FREQ_E1, '5': FREQ_E5a, '7': FREQ_E5b, '8': FREQ_E5, '6': FREQ_E6},
    SYS_BDS: {'2': FREQ_B1I, '1': FREQ_B1C, '5': FREQ_B2a, '7': FREQ_B2b,
              '8': FREQ_B2, '6': FREQ_B3},
    SYS_GLO: {'3': FREQ_G3, '4': FREQ_G1a, '6': FREQ_G2a},
}


def code2freq(sys, code, glo_fcn=0):
    """Carrier frequency of a tracking code.

    Parameters
    ----------
    sys : int
        Satellite system (SYS_*)
    code : int
        Observation code (CODE_*)
    glo_fcn : int, optional
        GLONASS frequency channel number (-7 to +6) for the G1/G2 FDMA bands

    Returns
    -------
    float
        Carrier frequency in Hz, 0.0 for an unknown system/code pair
    """
    obs = code2obs(code)
    if not obs:
        return 0.0
    band = obs[0]
    if sys == SYS_GLO:
        if band == '1':
            return FREQ_G1 + DFREQ_G1 * glo_fcn
        if band == '2':
            return FREQ_G2 + DFREQ_G2 * glo_fcn
    return _BAND_FREQ.get(sys, {}).get(band, 0.0)


def sat2freq(sat, code, glo_fcn=0):
    """Carrier frequency of a tracking code of a satellite"""
    return code2freq(sat2sys(sat), code, glo_fcn)
