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

"""PPP-B2b correction model and stream readers"""

from .b2b_reader import (FIELD_COUNTS, B2bMessageType, B2bStreamReader,
                         StreamCursor, read_b2b, read_b2b_type1, read_b2b_type2,
                         read_b2b_type3, read_b2b_type4)
from .corrections import (BiasRecord, ClockRecord, CorrectionEpoch,
                          CorrectionRecord, CorrectionState, CorrectionStatus,
                          MaskRecord, OrbitRecord, SlotMask, sat2slot, slot2sat)
