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
GNSS processing with PPP-B2b corrections.

Modules
-------
b2b_satpos : module
    Corrected satellite position, velocity and clock
frequency : module
    Carrier frequency of a tracking code
ionosphere_free : module
    Dual-frequency pseudorange with code biases
"""

from .b2b_satpos import (SatelliteState, ephpos, ephpos_b2b, max_dtoe,
                         satpos_b2b, satposs_b2b, select_b2b_eph, var_ura_b2b)
from .frequency import code2freq, sat2freq
from .ionosphere_free import CODE_BIAS_MODE, iono_free, prange_dualfrequency
