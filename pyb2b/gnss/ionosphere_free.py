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
Ionosphere-free pseudorange with PPP-B2b code biases.

The first two codes of an observation form the combination

    PC = ((P2 - gamma*P1) - (b2 - gamma*b1)) / (1 - gamma),  gamma = f1^2/f2^2

where b1/b2 are the Type-3 code biases of the tracked signals. Biases are
applied for GPS and BeiDou; GLONASS, Galileo and QZSS get the plain
combination.
"""

import logging
from typing import Optional, Sequence

from ..core.constants import (CODE_L1C, CODE_L1D, CODE_L1L, CODE_L1P,
                              CODE_L1X, CODE_L2I, CODE_L2L, CODE_L2X, CODE_L5D,
                              CODE_L5I, CODE_L5P, CODE_L5Q, CODE_L5X, CODE_L6I,
                              CODE_L7I, CODE_L7Q, SYS_BDS, SYS_GPS, SYS_NONE)
from ..core.data_structures import Observation
from ..core.options import DEFAULT_OPTIONS, B2bOptions
from ..ssr.corrections import CorrectionState
from .frequency import sat2freq

logger = logging.getLogger(__name__)

# tracking code -> code bias mode of a Type-3 record
CODE_BIAS_MODE = {
    SYS_GPS: {
        CODE_L1C: 0,    # L1 C/A
        CODE_L1P: 1,    # L1 P
        CODE_L1L: 4,    # L1C(P)
        CODE_L1X: 5,    # L1C(D+P)
        CODE_L2L: 7,    # L2C(L)
        CODE_L2X: 8,    # L2C(M+L)
        CODE_L5I: 11,   # L5 I
        CODE_L5Q: 12,   # L5 Q
        CODE_L5X: 12,   # L5 I+Q
    },
    SYS_BDS: {
        CODE_L2I: 0,    # B1I
        CODE_L1D: 1,    # B1C(D)
        CODE_L1P: 2,    # B1C(P)
        CODE_L5D: 4,    # B2a(D)
        CODE_L5P: 5,    # B2a(P)
        CODE_L7I: 7,    # B2b-I
        CODE_L7Q: 8,    # B2b-Q
        CODE_L6I: 12,   # B3I
    },
}


def iono_free(P1, P2, gamma, b1=0.0, b2=0.0):
    """Ionosphere-free combination of two bias-corrected pseudoranges"""
    return ((P2 - gamma * P1) - (b2 - gamma * b1)) / (1.0 - gamma)


def _code_bias(mode_table, code, dcb):
    mode = mode_table.get(int(code))
    return 0.0 if mode is None else dcb[mode]


def prange_dualfrequency(obs: Observation,
                         corrections: Optional[CorrectionState] = None,
                         dantr: Optional[Sequence[float]] = None,
                         dants: Optional[Sequence[float]] = None,
                         glo_fcn: int = 0,
                         opt: B2bOptions = DEFAULT_OPTIONS) -> float:
    """
    Ionosphere-free pseudorange of the first two codes of an observation.

    Parameters
    ----------
    obs : Observation
        Observation; ``P[0]``/``P[1]`` and ``code[0]``/``code[1]`` are used
    corrections : CorrectionState, optional
        B2b corrections providing the code biases
    dantr, dants : sequence of float, optional
        Receiver and satellite antenna range corrections per frequency (m)
    glo_fcn : int
        GLONASS frequency channel number
    opt : B2bOptions
        Processing options (code bias age limit)

    Returns
    -------
    float
        Ionosphere-free pseudorange (m), 0.0 when either pseudorange or
        carrier frequency is missing
    """
    if obs.P[0] == 0.0 or obs.P[1] == 0.0:
        return 0.0
    if obs.system == SYS_NONE:
        return 0.0

    f1 = sat2freq(obs.sat, obs.code[0], glo_fcn)
    f2 = sat2freq(obs.sat, obs.code[1], glo_fcn)
    if f1 == 0.0 or f2 == 0.0 or f1 == f2:
        return 0.0
    gamma = f1 ** 2 / f2 ** 2

    dantr = (0.0, 0.0) if dantr is None else dantr
    dants = (0.0, 0.0) if dants is None else dants
    P1 = obs.P[0] - dantr[0] - dants[0]
    P2 = obs.P[1] - dantr[1] - dants[1]

    record = corrections.current.get(obs.sat) if corrections is not None else None
    if record is None:
        return iono_free(P1, P2, gamma)

    bias = record.bias
    if abs(obs.time - bias.t0) > opt.maxage_cbias:
        logger.trace("code bias of sat %d too old", obs.sat)
        return iono_free(P1, P2, gamma)
    if bias.iod_ssr not in (record.orbit.iod_ssr, record.clock.iod_ssr, record.mask.iod_ssr):
        logger.trace("code bias of sat %d: IODSSR mismatch", obs.sat)
        return iono_free(P1, P2, gamma)

    mode_table = CODE_BIAS_MODE.get(obs.system)
    if mode_table is None:
        return iono_free(P1, P2, gamma)

    b1 = _code_bias(mode_table, obs.code[0], bias.dcb)
    b2 = _code_bias(mode_table, obs.code[1], bias.dcb)
    return iono_free(P1, P2, gamma, b1, b2)
