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

"""Core module: constants, numbering, time and data structures.

Example Usage:
    >>> from pyb2b.core import *
    >>>
    >>> sat = prn2sat(23, SYS_BDS)
    >>> sat2id(sat)
    'C23'
    >>> t = bdt2gpst(bdt2time(950, 345600.0))
"""

from .constants import *
from .data_structures import *
from .options import *
from .time import *
