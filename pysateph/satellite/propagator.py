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
Orbit propagators and constellation dispatch.

Every constellation family exposes the same two operations, position at an
epoch and clock bias at an elapsed time, through ``OrbitPropagator``. The
implementation is chosen from the record's constellation tag:

- GPS, QZSS, IRNSS, Galileo, BeiDou: ``KeplerianPropagator``
- GLONASS: ``GlonassPropagator`` (numerical integration)
- SBAS: ``SbasPropagator`` (state polynomial)

``compute_satellite_state`` is the usual entry point: it takes a record and
a ``GNSSTime`` epoch and returns the ECEF position and clock bias.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from ..config import NavConfig
from ..core.constants import KEPLER_MAX_ITER, KEPLER_TOL, SEC_IN_WEEK, TSTEP
from ..core.data_structures import NavigationRecord, SatelliteSystem
from ..core.errors import InvalidInputError
from ..core.time import GNSSTime
from .clock import keplerian_clock_bias
from .glonass import glonass_clock_bias, glonass_state
from .satellite_position import keplerian_position, kepler_constants, validate_keplerian
from .sbas import sbas_clock_bias, sbas_state

logger = logging.getLogger(__name__)

# Half interval of the central difference used for Keplerian velocity (s)
_VELOCITY_DT = 1e-3


class OrbitPropagator(ABC):
    """Abstract base class for broadcast orbit propagators"""

    @abstractmethod
    def compute_position(self, record: NavigationRecord, t: float,
                         t_ref: float) -> tuple[np.ndarray, Optional[float]]:
        """Compute the satellite ECEF position.

        Parameters
        ----------
        record : NavigationRecord
            Broadcast record of the propagator's constellation family
        t : float
            Evaluation epoch in seconds of week of the record's time scale
        t_ref : float
            Reference epoch of the record in seconds of week, usually
            ``reference_time(record)``

        Returns
        -------
        position : np.ndarray, shape (3,)
            ECEF position (m)
        eccentric_anomaly : float or None
            Eccentric anomaly for the Keplerian family, None otherwise
        """
        pass

    @abstractmethod
    def compute_clock_bias(self, record: NavigationRecord, dt: float,
                           eccentric_anomaly: Optional[float] = None) -> float:
        """Compute the satellite clock bias (s) at dt seconds from toc"""
        pass

    @abstractmethod
    def reference_time(self, record: NavigationRecord) -> float:
        """Default reference epoch t_ref of the record (seconds of week)"""
        pass

    def compute_velocity(self, record: NavigationRecord, t: float, t_ref: float) -> np.ndarray:
        """Satellite ECEF velocity (m/s) by central differences of the position"""
        rp, _ = self.compute_position(record, t + _VELOCITY_DT, t_ref)
        rm, _ = self.compute_position(record, t - _VELOCITY_DT, t_ref)
        return (rp - rm) / (2.0 * _VELOCITY_DT)


class KeplerianPropagator(OrbitPropagator):
    """
    Propagator for constellations broadcasting Keplerian elements.

    Parameters
    ----------
    tol : float
        Kepler solver convergence limit (rad)
    max_iter : int
        Kepler solver iteration cap
    validate : bool
        Check eccentricity and semi-major axis before computing
    """

    def __init__(self, tol: float = KEPLER_TOL, max_iter: int = KEPLER_MAX_ITER,
                 validate: bool = False):
        self.tol = tol
        self.max_iter = max_iter
        self.validate = validate

    def compute_position(self, record, t, t_ref):
        if self.validate:
            validate_keplerian(record)
        return keplerian_position(record, t, t_ref, kepler_constants(record),
                                  self.tol, self.max_iter)

    def compute_clock_bias(self, record, dt, eccentric_anomaly=None):
        return keplerian_clock_bias(record, dt, eccentric_anomaly, kepler_constants(record),
                                    self.tol, self.max_iter)

    def reference_time(self, record):
        return record.field('toe')


class GlonassPropagator(OrbitPropagator):
    """Propagator for GLONASS broadcast state vectors (RK4 integration)"""

    def __init__(self, step: float = TSTEP):
        if not step > 0.0:
            raise ValueError(f"Integration step must be positive, got {step!r}")
        self.step = step

    def compute_state(self, record, t, t_ref):
        """Position (m) and velocity (m/s) in PZ-90"""
        return glonass_state(record, t - t_ref, self.step)

    def compute_position(self, record, t, t_ref):
        rs, _ = self.compute_state(record, t, t_ref)
        return rs, None

    def compute_velocity(self, record, t, t_ref):
        _, vs = self.compute_state(record, t, t_ref)
        return vs

    def compute_clock_bias(self, record, dt, eccentric_anomaly=None):
        return glonass_clock_bias(record, dt)

    def reference_time(self, record):
        return record.toc.tow


class SbasPropagator(OrbitPropagator):
    """Propagator for SBAS broadcast state vectors"""

    def compute_state(self, record, t, t_ref):
        return sbas_state(record, t - t_ref)

    def compute_position(self, record, t, t_ref):
        rs, _ = self.compute_state(record, t, t_ref)
        return rs, None

    def compute_velocity(self, record, t, t_ref):
        _, vs = self.compute_state(record, t, t_ref)
        return vs

    def compute_clock_bias(self, record, dt, eccentric_anomaly=None):
        return sbas_clock_bias(record, dt)

    def reference_time(self, record):
        return record.toc.tow


_KEPLERIAN_SYSTEMS = (
    SatelliteSystem.GPS,
    SatelliteSystem.QZSS,
    SatelliteSystem.IRNSS,
    SatelliteSystem.GALILEO,
    SatelliteSystem.BEIDOU,
)


def get_propagator(system, config: Optional[NavConfig] = None) -> OrbitPropagator:
    """
    Select the propagator for a constellation.

    Parameters
    ----------
    system : SatelliteSystem or int
        Constellation tag
    config : NavConfig, optional
        Solver and integrator settings

    Returns
    -------
    OrbitPropagator

    Raises
    ------
    ValueError
        If the constellation has no broadcast orbit model
    """
    if config is None:
        config = NavConfig()

    try:
        system = SatelliteSystem(system)
    except ValueError:
        raise ValueError(f"Unsupported satellite system: {system!r}") from None

    if system in _KEPLERIAN_SYSTEMS:
        return KeplerianPropagator(config.kepler_tolerance, config.kepler_max_iter,
                                   config.validate_input)
    if system == SatelliteSystem.GLONASS:
        return GlonassPropagator(config.glonass_step)
    if system == SatelliteSystem.SBAS:
        return SbasPropagator()
    raise ValueError(f"Unsupported satellite system: {system.name}")


def _elapsed(record: NavigationRecord, epoch: GNSSTime, validate: bool) -> float:
    """Seconds from the record's toc to epoch"""
    if epoch.time_sys != record.toc.time_sys:
        if validate:
            raise InvalidInputError(
                f"{record.sat_id}: epoch in {epoch.time_sys} time, record in {record.toc.time_sys} time")
        logger.warning(f"{record.sat_id}: epoch in {epoch.time_sys} time, record in "
                       f"{record.toc.time_sys} time; no conversion applied")
        return (epoch.week - record.toc.week) * SEC_IN_WEEK + (epoch.tow - record.toc.tow)
    return epoch - record.toc


def _epoch_arguments(record, epoch, propagator, config):
    dt = _elapsed(record, epoch, config.validate_input)
    if abs(dt) > SEC_IN_WEEK / 2:
        logger.warning(f"{record.sat_id}: epoch {epoch} is {dt:.0f} s from toc {record.toc}")
    t = record.toc.tow + dt
    return t, propagator.reference_time(record), dt


def compute_satellite_state(record: NavigationRecord, epoch: GNSSTime,
                            config: Optional[NavConfig] = None) -> tuple[np.ndarray, float]:
    """
    Compute satellite position and clock bias at an epoch.

    Parameters
    ----------
    record : NavigationRecord
        Broadcast record
    epoch : GNSSTime
        Evaluation epoch, in the record's time scale
    config : NavConfig, optional
        Solver settings and input validation switch

    Returns
    -------
    rs : np.ndarray, shape (3,)
        Satellite ECEF position (m); WGS84 except GLONASS (PZ-90)
    dts : float
        Satellite clock bias (s)

    Raises
    ------
    NonConvergenceError
        If Kepler's equation does not converge
    InvalidInputError
        If validation is enabled and the input is rejected
    ValueError
        If the constellation is not supported

    Notes
    -----
    The eccentric anomaly found for the position is reused by the clock
    model, so the relativistic term is evaluated at tk = t - toe rather than
    at t - toc. The two coincide when toc == toe, as in GPS broadcasts.
    """
    if config is None:
        config = NavConfig()

    propagator = get_propagator(record.system, config)
    t, t_ref, dt = _epoch_arguments(record, epoch, propagator, config)

    rs, Ek = propagator.compute_position(record, t, t_ref)
    dts = propagator.compute_clock_bias(record, dt, Ek)
    return rs, dts


def compute_satellite_velocity(record: NavigationRecord, epoch: GNSSTime,
                               config: Optional[NavConfig] = None) -> np.ndarray:
    """Satellite ECEF velocity (m/s) at an epoch"""
    if config is None:
        config = NavConfig()

    propagator = get_propagator(record.system, config)
    t, t_ref, _ = _epoch_arguments(record, epoch, propagator, config)
    return propagator.compute_velocity(record, t, t_ref)
