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
PPP-B2b processing session.

Binds a broadcast ephemeris store, the four correction streams and the
correction state they feed, and serializes access to them.

Example Usage:
    >>> session = B2bSession(nav, mask="type1.txt", orbit="type2.txt",
    ...                      bias="type3.txt", clock="type4.txt")
    >>> for t in epochs:
    ...     session.advance(t)
    ...     st = session.satpos(t, sat)
"""

import logging
import threading
from typing import Dict, Optional, Sequence

from .core.data_structures import EphemerisStore, Observation
from .core.options import DEFAULT_OPTIONS, B2bOptions
from .gnss.b2b_satpos import SatelliteState, satpos_b2b, satposs_b2b
from .gnss.ionosphere_free import prange_dualfrequency
from .ssr.b2b_reader import B2bMessageType, B2bStreamReader, StreamCursor
from .ssr.corrections import CorrectionState

logger = logging.getLogger(__name__)


class B2bSession:
    """
    Broadcast ephemerides plus PPP-B2b correction streams.

    Parameters
    ----------
    nav : EphemerisStore
        Broadcast ephemerides
    mask, orbit, bias, clock : str or Path, optional
        Type-1 to Type-4 stream files; missing streams are not read
    opt : B2bOptions
        Processing options shared by readers and the correction engine
    antenna_offset : callable, optional
        Satellite antenna offset passed to :func:`satpos_b2b`
    """

    def __init__(self, nav: EphemerisStore, mask=None, orbit=None, bias=None, clock=None,
                 opt: B2bOptions = DEFAULT_OPTIONS, antenna_offset=None):
        self.nav = nav
        self.opt = opt
        self.antenna_offset = antenna_offset
        self.state = CorrectionState()
        self._lock = threading.Lock()

        self.readers: Dict[B2bMessageType, B2bStreamReader] = {}
        paths = ((B2bMessageType.MASK, mask), (B2bMessageType.ORBIT, orbit),
                 (B2bMessageType.CODE_BIAS, bias), (B2bMessageType.CLOCK, clock))
        for msg_type, path in paths:
            if path is not None:
                self.readers[msg_type] = B2bStreamReader(msg_type, path, self.state, opt)

        logger.info("B2b session: %d ephemerides, streams %s", len(nav),
                    [t.name for t in self.readers])

    def advance(self, obstime: float) -> Dict[B2bMessageType, StreamCursor]:
        """Read every stream up to obstime, masks first"""
        with self._lock:
            return {msg_type: self.readers[msg_type].advance(obstime)
                    for msg_type in sorted(self.readers)}

    def rewind(self):
        """Restart all streams and drop the corrections read so far"""
        with self._lock:
            for reader in self.readers.values():
                reader.rewind()
            self.state.reset()

    def satpos(self, time: float, sat: int, teph: Optional[float] = None) -> SatelliteState:
        with self._lock:
            return satpos_b2b(time, time if teph is None else teph, sat, self.nav,
                              self.state, self.opt, self.antenna_offset)

    def satposs(self, time: float, sats: Sequence[int]):
        with self._lock:
            return satposs_b2b(time, sats, self.nav, self.state, self.opt,
                               self.antenna_offset)

    def prange(self, obs: Observation, dantr=None, dants=None, glo_fcn: int = 0) -> float:
        """Ionosphere-free pseudorange corrected with Type-3 code biases"""
        with self._lock:
            return prange_dualfrequency(obs, self.state, dantr, dants, glo_fcn, self.opt)
