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

"""SBAS satellite state from broadcast state vector"""

import numpy as np

from ..core.constants import KM2M
from ..core.data_structures import NavigationRecord


def sbas_state(record: NavigationRecord, dt: float) -> tuple[np.ndarray, np.ndarray]:
    """
    Compute SBAS satellite position and velocity.

    SBAS satellites (WAAS, EGNOS, MSAS, ...) are geostationary and broadcast
    a WGS84 ECEF position, velocity and acceleration at the time of clock.
    The state is propagated with a second order polynomial:

        r = r0 + v0*dt + a*dt^2/2
        v = v0 + a*dt

    Parameters
    ----------
    record : NavigationRecord
        SBAS broadcast record
    dt : float
        Time from the time of clock (s)

    Returns
    -------
    rs : np.ndarray, shape (3,)
        Satellite position in ECEF (m)
    vs : np.ndarray, shape (3,)
        Satellite velocity in ECEF (m/s)
    """
    f = record.field
    r0 = np.array([f('X'), f('Y'), f('Z')]) * KM2M
    v0 = np.array([f('Xdot'), f('Ydot'), f('Zdot')]) * KM2M
    acc = np.array([f('Xacc'), f('Yacc'), f('Zacc')]) * KM2M

    rs = r0 + v0 * dt + acc * dt * dt / 2.0
    vs = v0 + acc * dt
    return rs, vs


def sbas_clock_bias(record: NavigationRecord, dt: float) -> float:
    """SBAS clock bias aGf0 + aGf1 * dt (s)"""
    return float(record.field('aGf0') + record.field('aGf1') * dt)
