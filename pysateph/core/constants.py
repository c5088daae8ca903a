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

"""GNSS Constants and System Parameters"""

from dataclasses import dataclass
from types import MappingProxyType

import numpy as np

# Physical Constants
CLIGHT = 299792458.0  # speed of light (m/s)

# Carrier frequencies used for group delay scaling
FREQ_L1 = 1.57542E9   # GPS/QZSS L1, Galileo E1 (Hz)
FREQ_L2 = 1.22760E9   # GPS/QZSS L2 (Hz)
FREQ_E5a = 1.17645E9  # Galileo E5a (Hz)
FREQ_E5b = 1.20714E9  # Galileo E5b (Hz)

# GNSS System IDs
SYS_NONE = 0x00   # invalid / unknown
SYS_GPS = 0x01    # GPS
SYS_GLO = 0x02    # GLONASS
SYS_GAL = 0x04    # Galileo
SYS_BDS = 0x08    # BeiDou
SYS_QZS = 0x10    # QZSS
SYS_SBS = 0x20    # SBAS
SYS_IRN = 0x40    # IRNSS

# Time System Parameters
GPST0 = [1980, 1, 6, 0, 0, 0]  # GPS time reference epoch
GST0 = [1999, 8, 22, 0, 0, 0]  # Galileo time reference epoch
BDT0 = [2006, 1, 1, 0, 0, 0]   # BeiDou time reference epoch
IRNT0 = [1999, 8, 22, 0, 0, 0]  # IRNSS time reference epoch

SEC_IN_WEEK = 604800.0         # seconds in a week
HALF_WEEK = 302400.0           # half a week (s)

# Earth rotation rate
OMGE = 7.2921151467E-5         # earth angular velocity, IS-GPS-200 (rad/s)

# System-specific gravitational constants
MU_GPS = 3.986005E14           # GPS gravitational constant, IS-GPS-200
MU_GAL = 3.986004418E14        # Galileo gravitational constant
MU_BDS = 3.986004418E14        # BeiDou gravitational constant (CGCS2000)
MU_GLO = 3.9860044E14          # GLONASS gravitational constant (PZ-90)

# System-specific earth angular velocities
OMGE_GAL = 7.2921151467E-5     # Galileo earth angular velocity
OMGE_BDS = 7.292115E-5         # BeiDou earth angular velocity
OMGE_GLO = 7.292115E-5         # GLONASS earth angular velocity

# Relativistic clock correction constant F = -2*sqrt(mu)/c^2 (s/sqrt(m))
F_CLOCK = -4.442807633E-10     # IS-GPS-200 value
F_CLOCK_GAL = -4.442807309E-10 # Galileo OS SIS ICD value
F_CLOCK_BDS = -4.442807309E-10 # BDS-SIS-ICD value

# GLONASS-specific parameters
J2_GLO = 1.0826257E-3          # GLONASS second zonal harmonic (PZ-90)
RE_GLO = 6378136.0             # GLONASS earth semimajor axis (m)
TSTEP = 60.0                   # GLONASS orbit integration step (s)

# BeiDou GEO satellites: PRN 1-5 and 59-63
BDS_GEO_MAX_PRN_LOW = 5
BDS_GEO_MIN_PRN_HIGH = 59

# Kepler equation solver
KEPLER_TOL = 1E-14             # convergence limit on eccentric anomaly (rad)
KEPLER_MAX_ITER = 1000         # iteration cap

# Unit conversions
D2R = np.pi / 180.0            # degrees to radians
KM2M = 1000.0                  # kilometers to meters


@dataclass(frozen=True)
class KeplerianConstants:
    """Physical constants used by the Keplerian broadcast orbit model.

    Attributes
    ----------
    mu : float
        Earth gravitational parameter (m^3/s^2)
    omega_e : float
        Earth rotation rate (rad/s)
    f_clock : float
        Relativistic clock correction constant (s/sqrt(m))
    """
    mu: float
    omega_e: float
    f_clock: float


_GPS_CONSTANTS = KeplerianConstants(MU_GPS, OMGE, F_CLOCK)

# Read-only, keyed by system ID
KEPLER_CONSTANTS = MappingProxyType({
    SYS_GPS: _GPS_CONSTANTS,
    SYS_QZS: _GPS_CONSTANTS,
    SYS_IRN: _GPS_CONSTANTS,
    SYS_GAL: KeplerianConstants(MU_GAL, OMGE_GAL, F_CLOCK_GAL),
    SYS_BDS: KeplerianConstants(MU_BDS, OMGE_BDS, F_CLOCK_BDS),
})


def sys2char(sys):
    """Convert system ID to RINEX character"""
    syschar = {
        SYS_GPS: 'G',
        SYS_GLO: 'R',
        SYS_GAL: 'E',
        SYS_BDS: 'C',
        SYS_QZS: 'J',
        SYS_SBS: 'S',
        SYS_IRN: 'I'
    }
    return syschar.get(sys, ' ')


def char2sys(c):
    """Convert RINEX character to system ID"""
    charmap = {
        'G': SYS_GPS,
        'R': SYS_GLO,
        'E': SYS_GAL,
        'C': SYS_BDS,
        'J': SYS_QZS,
        'S': SYS_SBS,
        'I': SYS_IRN
    }
    return charmap.get(c.upper(), SYS_NONE)
