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

"""Exceptions raised by satellite state computation"""


class NavigationError(Exception):
    """Base class for all pysateph errors"""


class NonConvergenceError(NavigationError):
    """Kepler's equation did not converge within the iteration cap.

    Attributes
    ----------
    mean_anomaly : float
        Mean anomaly the solver was called with (rad)
    eccentricity : float
        Eccentricity the solver was called with
    iterations : int
        Number of iterations performed before giving up
    """

    def __init__(self, mean_anomaly: float, eccentricity: float, iterations: int):
        self.mean_anomaly = mean_anomaly
        self.eccentricity = eccentricity
        self.iterations = iterations
        super().__init__(
            f"Kepler's equation did not converge after {iterations} iterations "
            f"(M={mean_anomaly!r}, e={eccentricity!r})"
        )


class InvalidInputError(NavigationError, ValueError):
    """Input rejected by optional validation (see NavConfig.validate_input)"""


class RinexFormatError(NavigationError, ValueError):
    """Malformed or unsupported RINEX navigation file"""
