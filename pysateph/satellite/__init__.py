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
Satellite position and clock computation from broadcast ephemeris.

Modules
-------
kepler : module
    Kepler's equation solver
satellite_position : module
    Keplerian orbit (IS-GPS-200 user algorithm, BeiDou GEO variant)
clock : module
    Keplerian clock polynomial with relativistic correction, group delays
glonass : module
    GLONASS state vector integration
sbas : module
    SBAS state vector polynomial
propagator : module
    Common propagator interface and constellation dispatch
ephemeris : module
    Record storage and selection
batch : module
    Many satellites by many epochs into a pandas DataFrame

Usage Examples
--------------
    >>> from pysateph.satellite import compute_satellite_state
    >>> rs, dts = compute_satellite_state(record, epoch)
    >>> print(f"Satellite position: {rs} m, clock: {dts} s")
"""

from .batch import compute_states
from .clock import group_delay, keplerian_clock_bias
from .ephemeris import EphemerisManager, is_record_valid, select_record
from .glonass import glonass_clock_bias, glonass_state
from .kepler import solve_kepler
from .propagator import (GlonassPropagator, KeplerianPropagator, OrbitPropagator,
                         SbasPropagator, compute_satellite_state,
                         compute_satellite_velocity, get_propagator)
from .satellite_position import keplerian_position
from .sbas import sbas_clock_bias, sbas_state
