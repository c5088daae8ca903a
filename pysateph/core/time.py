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

"""GNSS Time Systems and week arithmetic"""

import math
from datetime import datetime, timedelta
from typing import Union

from .constants import BDT0, GPST0, GST0, HALF_WEEK, IRNT0, SEC_IN_WEEK

# Calendar origin of the week count for each time scale. UTC is counted
# from the GPS origin; only the calendar is used, leap seconds are not.
_TIME_ORIGINS = {
    'GPS': datetime(*GPST0),
    'GAL': datetime(*GST0),
    'BDS': datetime(*BDT0),
    'IRN': datetime(*IRNT0),
    'UTC': datetime(*GPST0),
}

VALID_TIME_SYSTEMS = tuple(_TIME_ORIGINS)


def wrap_half_week(dt: float) -> float:
    """Wrap a time difference into (-302400, 302400] seconds.

    Adds or subtracts whole weeks so the value lies inside the half-week
    window; the result always differs from the input by an integer number
    of weeks. Non-finite input is returned unchanged.

    Parameters
    ----------
    dt : float
        Time difference in seconds

    Returns
    -------
    float
        Wrapped time difference in seconds

    Examples
    --------
    >>> wrap_half_week(400000.0)
    -204800.0
    >>> wrap_half_week(-302400.0)
    302400.0
    """
    if not math.isfinite(dt) or -HALF_WEEK < dt <= HALF_WEEK:
        return dt
    weeks = math.ceil((dt - HALF_WEEK) / SEC_IN_WEEK)
    return dt - weeks * SEC_IN_WEEK


class GNSSTime:
    """GNSS Time representation with type safety

    A time is a week number plus seconds of week in a named time scale.
    Arithmetic between two times checks that the time systems match, so
    epochs from different constellations are never mixed silently.

    Instances are immutable; arithmetic returns new times.
    """

    __slots__ = ('week', 'tow', 'time_sys')

    def __init__(self, week: int = 0, tow: float = 0.0, time_sys: str = 'GPS'):
        """
        Initialize GNSS time

        Parameters:
        -----------
        week : int
            Week number
        tow : float
            Time of week in seconds
        time_sys : str
            Time system ('GPS', 'GAL', 'BDS', 'IRN', 'UTC')
        """
        week = int(week)
        tow = float(tow)
        system = time_sys.upper()

        if system not in VALID_TIME_SYSTEMS:
            raise ValueError(f"Invalid time system: {time_sys}. Must be one of {list(VALID_TIME_SYSTEMS)}")

        # Normalize TOW to [0, 604800)
        if not 0.0 <= tow < SEC_IN_WEEK:
            shift = math.floor(tow / SEC_IN_WEEK)
            week += shift
            tow -= shift * SEC_IN_WEEK

        object.__setattr__(self, 'week', week)
        object.__setattr__(self, 'tow', tow)
        object.__setattr__(self, 'time_sys', system)

    def __setattr__(self, name, value):
        raise AttributeError(f"GNSSTime is immutable, cannot set {name!r}")

    def __delattr__(self, name):
        raise AttributeError(f"GNSSTime is immutable, cannot delete {name!r}")

    def __reduce__(self):
        return (GNSSTime, (self.week, self.tow, self.time_sys))

    @classmethod
    def from_datetime(cls, dt: datetime, time_sys: str = 'GPS') -> 'GNSSTime':
        """Create GNSSTime from a calendar datetime already in time_sys"""
        time_sys = time_sys.upper()
        if time_sys not in _TIME_ORIGINS:
            raise ValueError(f"Unknown time system: {time_sys}")

        delta = dt - _TIME_ORIGINS[time_sys]
        weeks = delta.days // 7
        tow = (delta.days % 7) * 86400 + delta.seconds + delta.microseconds * 1e-6

        return cls(weeks, tow, time_sys)

    @classmethod
    def from_gps_seconds(cls, seconds: float, time_sys: str = 'GPS') -> 'GNSSTime':
        """Create GNSSTime from seconds since the origin of time_sys"""
        week = int(seconds // SEC_IN_WEEK)
        tow = seconds - week * SEC_IN_WEEK
        return cls(week, tow, time_sys)

    def to_datetime(self) -> datetime:
        """Convert to calendar datetime in the same time scale"""
        return _TIME_ORIGINS[self.time_sys] + timedelta(weeks=self.week, seconds=self.tow)

    def to_seconds(self) -> float:
        """Seconds since the origin of this time scale"""
        return self.week * SEC_IN_WEEK + self.tow

    def sec_of_day(self) -> float:
        """Seconds since the start of the current day"""
        return self.tow % 86400.0

    def add_seconds(self, seconds: float) -> 'GNSSTime':
        """Add seconds to time"""
        return GNSSTime(self.week, self.tow + seconds, self.time_sys)

    def is_aligned(self, other: 'GNSSTime', max_dt: float = HALF_WEEK) -> bool:
        """Check that other is in the same time scale and within max_dt seconds"""
        if not isinstance(other, GNSSTime) or self.time_sys != other.time_sys:
            return False
        return abs(self - other) <= max_dt

    def _check_system(self, other: 'GNSSTime', action: str) -> None:
        if self.time_sys != other.time_sys:
            raise ValueError(f"Cannot {action} times with different systems: {self.time_sys} and {other.time_sys}")

    def __add__(self, seconds: float) -> 'GNSSTime':
        """Add seconds using + operator"""
        if isinstance(seconds, (int, float)):
            return self.add_seconds(seconds)
        return NotImplemented

    def __sub__(self, other: Union['GNSSTime', float]) -> Union[float, 'GNSSTime']:
        """Subtract time (giving seconds) or seconds (giving time)"""
        if isinstance(other, GNSSTime):
            self._check_system(other, 'subtract')
            return (self.week - other.week) * SEC_IN_WEEK + (self.tow - other.tow)
        if isinstance(other, (int, float)):
            return self.add_seconds(-other)
        return NotImplemented

    def __lt__(self, other: 'GNSSTime') -> bool:
        if not isinstance(other, GNSSTime):
            return NotImplemented
        self._check_system(other, 'compare')
        return (self.week, self.tow) < (other.week, other.tow)

    def __le__(self, other: 'GNSSTime') -> bool:
        if not isinstance(other, GNSSTime):
            return NotImplemented
        self._check_system(other, 'compare')
        return (self.week, self.tow) <= (other.week, other.tow)

    def __gt__(self, other: 'GNSSTime') -> bool:
        if not isinstance(other, GNSSTime):
            return NotImplemented
        self._check_system(other, 'compare')
        return (self.week, self.tow) > (other.week, other.tow)

    def __ge__(self, other: 'GNSSTime') -> bool:
        if not isinstance(other, GNSSTime):
            return NotImplemented
        self._check_system(other, 'compare')
        return (self.week, self.tow) >= (other.week, other.tow)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GNSSTime):
            return NotImplemented
        return (self.time_sys, self.week, self.tow) == (other.time_sys, other.week, other.tow)

    def __hash__(self):
        return hash((self.time_sys, self.week, self.tow))

    def __str__(self):
        return f"{self.time_sys} Week: {self.week}, TOW: {self.tow:.3f}"

    def __repr__(self):
        return f"GNSSTime({self.week}, {self.tow}, '{self.time_sys}')"
