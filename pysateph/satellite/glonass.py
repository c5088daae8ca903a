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
GLONASS satellite state from broadcast state vector.

GLONASS broadcasts position, velocity and luni-solar acceleration in the
PZ-90 Earth-fixed frame at the reference time tb. The state at another
epoch is obtained by integrating the equations of motion (central gravity,
J2 and Earth rotation terms, broadcast acceleration held constant) with a
fixed step 4th order Runge-Kutta scheme, following GLONASS ICD 5.1
Appendix J.
"""

import numpy as np
from numba import njit

from ..core.constants import *
from ..core.data_structures import NavigationRecord


@njit(cache=True)
def _deq(x, acc):
    """Time derivative of the state [x, y, z, vx, vy, vz] in PZ-90"""
    xdot = np.zeros(6)
    r2 = x[0] * x[0] + x[1] * x[1] + x[2] * x[2]
    if r2 <= 0.0:
        return xdot
    r3 = r2 * np.sqrt(r2)
    omg2 = OMGE_GLO * OMGE_GLO

    a = 1.5 * J2_GLO * MU_GLO * RE_GLO * RE_GLO / r2 / r3   # 3/2*J2*mu*ae^2/r^5
    b = 5.0 * x[2] * x[2] / r2                              # 5*z^2/r^2
    c = -MU_GLO / r3 - a * (1.0 - b)                        # -mu/r^3 - a*(1 - b)

    xdot[0] = x[3]
    xdot[1] = x[4]
    xdot[2] = x[5]
    xdot[3] = (c + omg2) * x[0] + 2.0 * OMGE_GLO * x[4] + acc[0]
    xdot[4] = (c + omg2) * x[1] - 2.0 * OMGE_GLO * x[3] + acc[1]
    xdot[5] = (c - 2.0 * a) * x[2] + acc[2]
    return xdot


@njit(cache=True)
def _rk4_step(t, x, acc):
    k1 = _deq(x, acc)
    k2 = _deq(x + k1 * t / 2.0, acc)
    k3 = _deq(x + k2 * t / 2.0, acc)
    k4 = _deq(x + k3 * t, acc)
    return x + (k1 + 2.0 * k2 + 2.0 * k3 + k4) * t / 6.0


@njit(cache=True)
def _integrate(x0, acc, t, step):
    """Integrate the state over t seconds in steps of at most step seconds"""
    x = x0.copy()
    tt = -step if t < 0.0 else step
    while abs(t) > 1e-9:
        if abs(t) < step:
            tt = t
        x = _rk4_step(tt, x, acc)
        t -= tt
    return x


def broadcast_state(record: NavigationRecord) -> tuple[np.ndarray, np.ndarray]:
    """
    Reference state and acceleration of a GLONASS record in SI units.

    Returns
    -------
    x0 : np.ndarray, shape (6,)
        Position (m) and velocity (m/s) at tb
    acc : np.ndarray, shape (3,)
        Luni-solar acceleration (m/s^2)
    """
    f = record.field
    x0 = np.array([f('X'), f('Y'), f('Z'), f('Xdot'), f('Ydot'), f('Zdot')]) * KM2M
    acc = np.array([f('Xacc'), f('Yacc'), f('Zacc')]) * KM2M
    return x0, acc


def glonass_state(record: NavigationRecord, dt: float,
                  step: float = TSTEP) -> tuple[np.ndarray, np.ndarray]:
    """
    Compute GLONASS satellite position and velocity.

    Parameters
    ----------
    record : NavigationRecord
        GLONASS broadcast record
    dt : float
        Time from the reference epoch tb (s), may be negative
    step : float, optional
        Integration step (s), default 60

    Returns
    -------
    rs : np.ndarray, shape (3,)
        Satellite position in PZ-90 ECEF (m)
    vs : np.ndarray, shape (3,)
        Satellite velocity in PZ-90 ECEF (m/s)

    Notes
    -----
    The integration is bounded: ceil(|dt|/step) Runge-Kutta steps. Output
    is in PZ-90, which differs from WGS84 by a few decimetres at most; no
    frame transformation is applied.
    """
    if not step > 0.0:
        raise ValueError(f"Integration step must be positive, got {step!r}")

    x0, acc = broadcast_state(record)
    if not np.isfinite(dt):
        nan = np.full(3, np.nan)
        return nan, nan.copy()

    x = _integrate(x0, acc, float(dt), float(step))
    return x[:3], x[3:]


def glonass_clock_bias(record: NavigationRecord, dt: float) -> float:
    """
    GLONASS satellite clock bias.

    dts = -tauN + gammaN * dt, with dt the time from tb in seconds. RINEX
    stores -tauN directly.
    """
    return float(record.field('minus_tauN') + record.field('gammaN') * dt)
