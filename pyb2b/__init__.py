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
PyB2b - BeiDou PPP-B2b correction processing

Reads RINEX-4 broadcast navigation data and the four PPP-B2b correction
streams (satellite mask, orbit, code bias, clock) and produces corrected
satellite positions, clocks and ionosphere-free pseudoranges.
"""

__version__ = "1.0.0"
__author__ = "PyB2b Development Team"
__title__ = "pyb2b"
__description__ = "BeiDou PPP-B2b correction processing"

from . import logger
from .core import *
from .gnss import *
from .io import *
from .satellite import *
from .session import B2bSession
from .ssr import *
