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

"""Satellite clock correction for Keplerian broadcast ephemeris"""

from typing import Optional

import numpy as np

from ..core.constants import *
from ..core.data_structures import NavigationRecord, SatelliteSystem
from ..core.time import wrap_half_week
from .satellite_position import eccentric_anomaly, kepler_constants


def keplerian_clock_bias(record: NavigationRecord, dt: float,
                         eccentric_anomaly_in: Optional[float] = None,
                         constants: Optional[KeplerianConstants] = None,
                         tol: float = KEPLER_TOL, max_iter: int = KEPLER_MAX_ITER) -> float:
    """
    Compute satellite clock bias (SV PRN code phase offset).

    Parameters
    ----------
    record : NavigationRecord
        Keplerian broadcast record
    dt : float
        Elapsed time t - toc in seconds
    eccentric_anomaly_in : float, optional
        Eccentric anomaly to use for the relativistic term. If omitted it is
        computed from the orbit with dt in place of tk.
    constants : KeplerianConstants, optional
        Override of the constellation constants
    tol, max_iter :
        Kepler solver tolerance and iteration cap

    Returns
    -------
    float
        Clock bias in seconds, including the relativistic correction

    Raises
    ------
    NonConvergenceError
        If the eccentric anomaly has to be computed and does not converge

    Notes
    -----
    The bias is

        dtsv = af0 + af1*dt + af2*dt^2 + F*e*sqrt(A)*sin(Ek)

    with dt wrapped into (-302400, 302400]. Group delays (TGD/BGD) are not
    applied; see ``group_delay``.

    Passing an eccentric anomaly computed for a different epoch than dt
    trades accuracy for one Kepler solve fewer.
    """
    if constants is None:
        constants = kepler_constants(record)

    dt = wrap_half_week(dt)

    if eccentric_anomaly_in is None:
        Ek = eccentric_anomaly(record, dt, constants, tol, max_iter)
    else:
        Ek = eccentric_anomaly_in

    # Relativistic correction term
    dtr = constants.f_clock * record.field('e') * record.field('sqrtA') * np.sin(Ek)

    # Clock bias (polynomial model)
    dtsv = record.field('af0') + record.field('af1') * dt + (record.field('af2') * dt) * dt

    return float(dtsv + dtr)


def group_delay(record: NavigationRecord, freq_idx: int = 0) -> float:
    """
    Broadcast group delay for a single-frequency user.

    The clock bias from ``keplerian_clock_bias`` excludes group delays; a
    single-frequency user subtracts the value returned here.

    Parameters
    ----------
    record : NavigationRecord
        Keplerian broadcast record
    freq_idx : int
        Frequency index:
        - 0: L1 / E1 / B1I
        - 1: L2 / E5b / B2I
        - 2: E5a (Galileo only)

    Returns
    -------
    float
        Group delay in seconds, 0.0 where the system broadcasts none

    Notes
    -----
    GPS/QZSS/IRNSS: TGD on L1, (f1/f2)^2 * TGD on L2.
    Galileo: BGD(E1,E5b) on E1, (f1/f5b)^2 * BGD(E1,E5b) on E5b and
    (f1/f5a)^2 * BGD(E1,E5a) on E5a.
    BeiDou: TGD1 on B1I, TGD2 on B2I.
    """
    sys = record.system

    if sys in (SatelliteSystem.GPS, SatelliteSystem.QZSS, SatelliteSystem.IRNSS):
        tgd = record.field('TGD')
        if freq_idx == 0:
            return tgd
        if freq_idx == 1 and sys != SatelliteSystem.IRNSS:
            return (FREQ_L1 / FREQ_L2) ** 2 * tgd

    elif sys == SatelliteSystem.GALILEO:
        if freq_idx == 0:
            return record.field('BGD_E5b_E1')
        if freq_idx == 1:
            return (FREQ_L1 / FREQ_E5b) ** 2 * record.field('BGD_E5b_E1')
        if freq_idx == 2:
            return (FREQ_L1 / FREQ_E5a) ** 2 * record.field('BGD_E5a_E1')

    elif sys == SatelliteSystem.BEIDOU:
        if freq_idx == 0:
            return record.field('TGD1')
        if freq_idx == 1:
            return record.field('TGD2')

    return 0.0
