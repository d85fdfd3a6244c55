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
PPP-B2b Processing Parameters
=============================

Age limits, ephemeris selection windows and stream tolerances used when
ingesting B2b corrections and applying them to broadcast ephemerides.
"""

from dataclasses import dataclass, fields

# ============================================================================
# STREAM INGESTION
# ============================================================================
DTTOL = 0.025            # tolerance of a stream record ahead of the target time (s)

# ============================================================================
# CORRECTION AGE LIMITS
# ============================================================================
MAXAGE_B2B = 96.0        # orbit/URA correction (s)
MAXAGE_B2B_CLOCK = 12.0  # clock correction (s)
MAXAGE_B2B_CBIAS = 86400.0  # code bias correction (s)

# ============================================================================
# EPHEMERIS SELECTION
# ============================================================================
MAXDTOE = 7200.0         # GPS and default max |toe - t| (s)
MAXDTOE_QZS = 7200.0     # QZSS (s)
MAXDTOE_GAL = 14400.0    # Galileo (s)
MAXDTOE_CMP = 21600.0    # BeiDou (s)

# ============================================================================
# VELOCITY BY FINITE DIFFERENCE
# ============================================================================
DT_VEL = 1E-3            # step between the two ephemeris evaluations (s)


@dataclass(frozen=True)
class B2bOptions:
    """Processing options for B2b ingestion and correction."""

    dttol: float = DTTOL
    maxage_orbit: float = MAXAGE_B2B
    maxage_clock: float = MAXAGE_B2B_CLOCK
    maxage_cbias: float = MAXAGE_B2B_CBIAS
    maxdtoe: float = MAXDTOE
    maxdtoe_qzs: float = MAXDTOE_QZS
    maxdtoe_gal: float = MAXDTOE_GAL
    maxdtoe_cmp: float = MAXDTOE_CMP
    dt_vel: float = DT_VEL

    @classmethod
    def from_dict(cls, config: dict) -> "B2bOptions":
        """Build options from a mapping, missing keys keep their defaults

        Example config:
        {
            'dttol': 0.025,
            'maxage_clock': 12.0,
        }
        """
        known = {f.name for f in fields(cls)}
        unknown = set(config) - known
        if unknown:
            raise ValueError(f"Unknown B2b option(s): {', '.join(sorted(unknown))}")
        return cls(**{k: float(v) for k, v in config.items()})


DEFAULT_OPTIONS = B2bOptions()
