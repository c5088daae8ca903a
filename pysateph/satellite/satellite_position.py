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

"""Satellite position computation from Keplerian broadcast ephemeris"""

import math
from typing import Optional

import numpy as np

from ..core.constants import *
from ..core.data_structures import NavigationRecord, SatelliteSystem
from ..core.errors import InvalidInputError
from ..core.time import wrap_half_week
from .kepler import solve_kepler

_SIN_5 = math.sin(-5.0 * D2R)
_COS_5 = math.cos(-5.0 * D2R)


def kepler_constants(record: NavigationRecord) -> KeplerianConstants:
    """Return the (mu, omega_e, F) set for the record's constellation"""
    try:
        return KEPLER_CONSTANTS[int(record.system)]
    except KeyError:
        raise ValueError(f"{record.system.name} does not broadcast Keplerian elements") from None


def is_bds_geo(record: NavigationRecord) -> bool:
    """True for BeiDou geostationary satellites (PRN 1-5, 59-63)"""
    return (record.system == SatelliteSystem.BEIDOU and
            (record.prn <= BDS_GEO_MAX_PRN_LOW or record.prn >= BDS_GEO_MIN_PRN_HIGH))


def validate_keplerian(record: NavigationRecord) -> None:
    """
    Reject orbital elements that cannot describe an elliptic orbit.

    Only called when input validation is enabled; by default garbage input
    propagates to garbage (possibly NaN) output.

    Raises
    ------
    InvalidInputError
        If e is outside [0, 1) or sqrt(A) is not positive
    """
    e = record.field('e')
    sqrt_a = record.field('sqrtA')
    if not 0.0 <= e < 1.0:
        raise InvalidInputError(f"{record.sat_id}: eccentricity {e!r} outside [0, 1)")
    if not sqrt_a > 0.0:
        raise InvalidInputError(f"{record.sat_id}: sqrt(A) {sqrt_a!r} is not positive")


def eccentric_anomaly(record: NavigationRecord, tk: float,
                      constants: Optional[KeplerianConstants] = None,
                      tol: float = KEPLER_TOL, max_iter: int = KEPLER_MAX_ITER) -> float:
    """
    Eccentric anomaly at tk seconds from the reference epoch.

    Computes the corrected mean motion, the mean anomaly and solves Kepler's
    equation. tk is used as given; callers wrap it into the half-week
    window first.

    Raises
    ------
    NonConvergenceError
        Propagated from the Kepler solver
    """
    if constants is None:
        constants = kepler_constants(record)

    A = np.float64(record.field('sqrtA')) ** 2
    n0 = np.sqrt(constants.mu / (A * A * A))
    n = n0 + record.field('deltaN')
    Mk = record.field('M0') + n * tk
    return solve_kepler(Mk, record.field('e'), tol, max_iter)


def keplerian_position(record: NavigationRecord, t: float, toe: float,
                       constants: Optional[KeplerianConstants] = None,
                       tol: float = KEPLER_TOL, max_iter: int = KEPLER_MAX_ITER
                       ) -> tuple[np.ndarray, float]:
    """
    Compute satellite ECEF position from Keplerian broadcast ephemeris.

    Implements the user algorithm for ephemeris determination of
    IS-GPS-200 Table 20-IV, shared by GPS, QZSS, IRNSS, Galileo and BeiDou
    (MEO/IGSO; BeiDou GEO uses the BDS-SIS-ICD variant).

    Parameters
    ----------
    record : NavigationRecord
        Keplerian broadcast record
    t : float
        Evaluation epoch in seconds of week, same time scale as toe
    toe : float
        Ephemeris reference time in seconds of week
    constants : KeplerianConstants, optional
        Override of the constellation constants
    tol, max_iter :
        Kepler solver tolerance and iteration cap

    Returns
    -------
    rs : np.ndarray, shape (3,)
        Satellite position in ECEF (m)
    Ek : float
        Eccentric anomaly used (rad), reusable by the clock model

    Raises
    ------
    NonConvergenceError
        If Kepler's equation does not converge

    Notes
    -----
    The time from ephemeris tk = t - toe is always wrapped into
    (-302400, 302400] so that epochs on either side of a week boundary are
    handled. Non-finite parameters propagate to non-finite coordinates.
    """
    if constants is None:
        constants = kepler_constants(record)
    omge = constants.omega_e

    e = record.field('e')
    A = np.float64(record.field('sqrtA')) ** 2
    tk = wrap_half_week(t - toe)

    Ek = eccentric_anomaly(record, tk, constants, tol, max_iter)

    sinE = np.sin(Ek)
    cosE = np.cos(Ek)
    vk = np.arctan2(np.sqrt(1.0 - e * e) * sinE, cosE - e)   # true anomaly

    # Second harmonic perturbations
    Fk = vk + record.field('omega')                            # argument of latitude
    sin2F = np.sin(2.0 * Fk)
    cos2F = np.cos(2.0 * Fk)
    duk = record.field('Cus') * sin2F + record.field('Cuc') * cos2F
    drk = record.field('Crs') * sin2F + record.field('Crc') * cos2F
    dik = record.field('Cis') * sin2F + record.field('Cic') * cos2F

    uk = Fk + duk
    rk = A * (1.0 - e * cosE) + drk
    ik = record.field('i0') + dik + record.field('IDOT') * tk

    # Position in orbital plane
    xk = rk * np.cos(uk)
    yk = rk * np.sin(uk)
    cosi = np.cos(ik)
    sini = np.sin(ik)

    OMEGA0 = record.field('OMEGA0')
    OMEGADOT = record.field('OMEGADOT')

    if is_bds_geo(record):
        # Node in the inertial frame, then rotate -5 deg about X and omge*tk about Z
        Ok = OMEGA0 + OMEGADOT * tk - omge * toe
        sinO = np.sin(Ok)
        cosO = np.cos(Ok)
        xg = xk * cosO - yk * cosi * sinO
        yg = xk * sinO + yk * cosi * cosO
        zg = yk * sini
        sino = np.sin(omge * tk)
        coso = np.cos(omge * tk)
        rs = np.array([
            xg * coso + yg * sino * _COS_5 + zg * sino * _SIN_5,
            -xg * sino + yg * coso * _COS_5 + zg * coso * _SIN_5,
            -yg * _SIN_5 + zg * _COS_5,
        ])
        return rs, Ek

    # Corrected longitude of ascending node
    Ok = OMEGA0 + (OMEGADOT - omge) * tk - omge * toe
    sinO = np.sin(Ok)
    cosO = np.cos(Ok)

    rs = np.array([
        xk * cosO - yk * sinO * cosi,
        xk * sinO + yk * cosO * cosi,
        yk * sini,
    ])
    return rs, Ek
