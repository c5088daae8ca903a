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

"""Core definitions.

- **Constants**: physical constants, system identifiers, per-constellation
  Keplerian constants (mu, earth rotation rate, relativistic F)
- **Data Structures**: `SatelliteSystem`, `NavigationRecord` and the
  per-constellation field tables
- **Time**: `GNSSTime` week / time-of-week values and half-week wrapping
- **Errors**: exception hierarchy rooted at `NavigationError`

Example Usage:
    >>> from pysateph.core import *
    >>>
    >>> toc = GNSSTime(2295, 172800.0, 'GPS')
    >>> record = NavigationRecord(SatelliteSystem.GPS, 5, toc, data)
    >>> record.field('sqrtA')
    5153.6
"""

from .constants import *
from .data_structures import *
from .errors import *
from .time import *
