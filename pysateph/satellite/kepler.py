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
Kepler's equation solver.

Solves M = E - e*sin(E) for the eccentric anomaly E by fixed-point
iteration, as prescribed by IS-GPS-200 Table 20-IV. The same solver is used
by the orbit and the clock models so both always see the same E for the
same epoch.
"""

import logging
import math

from numba import njit

from ..core.constants import KEPLER_MAX_ITER, KEPLER_TOL
from ..core.errors import NonConvergenceError

logger = logging.getLogger(__name__)


@njit(cache=True)
def _fixed_point(M, e, tol, max_iter):
    """
    Iterate E(i+1) = M + e*sin(E(i)) starting from E(0) = M.

    Returns
    -------
    E : float
        Last iterate
    iterations : int
        Number of iterations performed
    converged : bool
        True if |E(i+1) - E(i)| <= tol was reached
    """
    E = M
    for i in range(max_iter):
        E_next = M + e * math.sin(E)
        if abs(E_next - E) <= tol:
            return E_next, i + 1, True
        E = E_next
    return E, max_iter, False


def solve_kepler(M: float, e: float, tol: float = KEPLER_TOL,
                 max_iter: int = KEPLER_MAX_ITER) -> float:
    """
    Solve Kepler's equation for the eccentric anomaly.

    Parameters
    ----------
    M : float
        Mean anomaly (rad)
    e : float
        Eccentricity, expected in [0, 1)
    tol : float, optional
        Convergence limit on successive iterates (rad), default 1e-14
    max_iter : int, optional
        Iteration cap, default 1000

    Returns
    -------
    float
        Eccentric anomaly E (rad) with E = M + e*sin(E)

    Raises
    ------
    NonConvergenceError
        If the tolerance is not reached within max_iter iterations, or if
        e >= 1 (the fixed-point iteration only applies to elliptic orbits)

    Notes
    -----
    The iteration is seeded with E = M, so a circular orbit (e = 0) returns
    M unchanged after the first step. NaN input never satisfies the
    tolerance test and ends in NonConvergenceError.

    Examples
    --------
    >>> E = solve_kepler(1.0, 0.01)
    >>> abs(E - 0.01 * math.sin(E) - 1.0) < 1e-12
    True
    """
    M = float(M)
    e = float(e)

    if e >= 1.0:
        logger.debug("Kepler solver called with non-elliptic eccentricity e=%r", e)
        raise NonConvergenceError(M, e, 0)

    E, iterations, converged = _fixed_point(M, e, float(tol), int(max_iter))
    if not converged:
        logger.debug("Kepler solver gave up after %d iterations (M=%r, e=%r)", iterations, M, e)
        raise NonConvergenceError(M, e, iterations)

    return float(E)
