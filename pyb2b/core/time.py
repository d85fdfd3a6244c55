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

"""Time handling on the continuous GPS-seconds axis.

All epochs in pyb2b are floats counting seconds since the GPS epoch
(1980-01-06 00:00:00 GPST). BeiDou week/seconds-of-week values are placed on
the same axis with :func:`bdt2time` (BDT label seconds) and shifted to GPST
with :func:`bdt2gpst`.
"""

import math
from datetime import datetime, timedelta

from .constants import BDT_WEEK_OFFSET, GPS_BDS_OFFSET, GPST0, HALF_WEEK, WEEK_SECONDS

_GPST0_DT = datetime(*GPST0)


def epoch2time(ep):
    """Calendar epoch [year, month, day, hour, min, sec] to GPS seconds

    Parameters:
    -----------
    ep : sequence
        Calendar fields, seconds may be fractional

    Returns:
    --------
    float
        Seconds since the GPS epoch (time-system agnostic)
    """
    year, month, day, hour, minute = (int(v) for v in ep[:5])
    sec = float(ep[5]) if len(ep) > 5 else 0.0
    dt = datetime(year, month, day, hour, minute) - _GPST0_DT
    return dt.days * 86400.0 + dt.seconds + sec


def time2epoch(t):
    """GPS seconds to calendar epoch [year, month, day, hour, min, sec]"""
    whole = math.floor(t)
    dt = _GPST0_DT + timedelta(seconds=whole)
    return [dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second + (t - whole)]


def gpst2time(week, tow):
    """GPS week and time of week to GPS seconds"""
    return week * WEEK_SECONDS + tow


def time2gpst(t):
    """GPS seconds to (GPS week, time of week)"""
    week = int(math.floor(t / WEEK_SECONDS))
    return week, t - week * WEEK_SECONDS


def bdt2time(week, sow):
    """BDT week and seconds of week to BDT time on the GPS-seconds axis"""
    return (week + BDT_WEEK_OFFSET) * WEEK_SECONDS + sow


def bdt2gpst(t):
    """BDT to GPST"""
    return t + GPS_BDS_OFFSET


def gpst2bdt(t):
    """GPST to BDT"""
    return t - GPS_BDS_OFFSET


def timeadd(t, sec):
    """Add seconds to a time"""
    return t + sec


def timediff(t1, t2):
    """Time difference t1 - t2 in seconds"""
    return t1 - t2


def adjweek(t, t0):
    """Move t by one week so that it lies within half a week of t0

    Resolves the week ambiguity of time-of-week-only fields.
    """
    tt = timediff(t, t0)
    if tt < -HALF_WEEK:
        return timeadd(t, WEEK_SECONDS)
    if tt > HALF_WEEK:
        return timeadd(t, -WEEK_SECONDS)
    return t
