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
Broadcast ephemeris handling.

Modules
-------
ephemeris : module
    RINEX-4 field decoding and encoding, URA tables
kepler : module
    Keplerian propagation including B-CNAV rates and BeiDou GEO satellites
legacy : module
    LNAV/D1/D2 evaluation through cssrlib
"""

from .ephemeris import (NFIELDS, URA_EPH, decode_ephemeris, encode_ephemeris,
                        ura_value, uraindex, var_uraeph)
from .kepler import eph2pos_cnav, solve_kepler
