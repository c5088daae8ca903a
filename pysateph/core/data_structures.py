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

"""Core data structures for broadcast navigation records"""

from dataclasses import dataclass
from enum import IntEnum
from types import MappingProxyType

from .constants import *
from .time import GNSSTime

NAV_DATA_SIZE = 31

# Slot layout of the broadcast orbit lines, RINEX 3.04 Table A8-A16
FIELD_TABLE_VERSION = "RINEX-3.04"


class SatelliteSystem(IntEnum):
    """Enumeration of satellite constellations.

    Values are the system bitmask IDs (SYS_GPS, SYS_GLO, ...), so a member
    can be used anywhere an integer system ID is expected.
    """
    GPS = SYS_GPS
    GLONASS = SYS_GLO
    GALILEO = SYS_GAL
    BEIDOU = SYS_BDS
    QZSS = SYS_QZS
    SBAS = SYS_SBS
    IRNSS = SYS_IRN

    @property
    def char(self) -> str:
        """RINEX system letter"""
        return sys2char(self.value)

    @classmethod
    def from_char(cls, c: str) -> 'SatelliteSystem':
        """Look up a system by its RINEX letter"""
        sys_id = char2sys(c)
        if sys_id == SYS_NONE:
            raise ValueError(f"Unknown satellite system letter: {c!r}")
        return cls(sys_id)


def _index_map(names):
    return MappingProxyType({name: i for i, name in enumerate(names) if name})


# Orbital slots shared by every Keplerian constellation
_KEPLER_ORBIT = (
    'af0', 'af1', 'af2', None, 'Crs', 'deltaN', 'M0',
    'Cuc', 'e', 'Cus', 'sqrtA',
    'toe', 'Cic', 'OMEGA0', 'Cis',
    'i0', 'Crc', 'omega', 'OMEGADOT',
    'IDOT',
)

_GPS_FIELDS = _index_map(_KEPLER_ORBIT[:3] + ('IODE',) + _KEPLER_ORBIT[4:] + (
    'L2codes', 'week', 'L2Pflag',
    'accuracy', 'health', 'TGD', 'IODC',
    'tot', 'fit',
))

_GAL_FIELDS = _index_map(_KEPLER_ORBIT[:3] + ('IODnav',) + _KEPLER_ORBIT[4:] + (
    'data_sources', 'week', None,
    'SISA', 'health', 'BGD_E5a_E1', 'BGD_E5b_E1',
    'tot',
))

_BDS_FIELDS = _index_map(_KEPLER_ORBIT[:3] + ('AODE',) + _KEPLER_ORBIT[4:] + (
    None, 'week', None,
    'accuracy', 'SatH1', 'TGD1', 'TGD2',
    'tot', 'AODC',
))

_IRN_FIELDS = _index_map(_KEPLER_ORBIT[:3] + ('IODEC',) + _KEPLER_ORBIT[4:] + (
    None, 'week', None,
    'URA', 'health', 'TGD', None,
    'tot',
))

# GLONASS and SBAS broadcast a state vector in km, km/s, km/s^2
_GLO_FIELDS = _index_map((
    'minus_tauN', 'gammaN', 'tk',
    'X', 'Xdot', 'Xacc', 'health',
    'Y', 'Ydot', 'Yacc', 'freq_num',
    'Z', 'Zdot', 'Zacc', 'age',
))

_SBS_FIELDS = _index_map((
    'aGf0', 'aGf1', 'tot',
    'X', 'Xdot', 'Xacc', 'health',
    'Y', 'Ydot', 'Yacc', 'URA',
    'Z', 'Zdot', 'Zacc', 'IODN',
))

FIELD_TABLES = MappingProxyType({
    SatelliteSystem.GPS: _GPS_FIELDS,
    SatelliteSystem.QZSS: _GPS_FIELDS,
    SatelliteSystem.GALILEO: _GAL_FIELDS,
    SatelliteSystem.BEIDOU: _BDS_FIELDS,
    SatelliteSystem.IRNSS: _IRN_FIELDS,
    SatelliteSystem.GLONASS: _GLO_FIELDS,
    SatelliteSystem.SBAS: _SBS_FIELDS,
})

# Native time scale of the epoch (time of clock) of each constellation
TIME_SYSTEMS = MappingProxyType({
    SatelliteSystem.GPS: 'GPS',
    SatelliteSystem.QZSS: 'GPS',
    SatelliteSystem.SBAS: 'GPS',
    SatelliteSystem.GALILEO: 'GAL',
    SatelliteSystem.BEIDOU: 'BDS',
    SatelliteSystem.IRNSS: 'IRN',
    SatelliteSystem.GLONASS: 'UTC',
})


@dataclass(frozen=True)
class NavigationRecord:
    """One broadcast navigation message for one satellite.

    The parameter block is an ordered sequence of up to 31 numbers whose
    meaning depends on the slot and on the constellation. Use ``field`` to
    read a parameter by name; the name-to-slot mapping comes from
    ``FIELD_TABLES`` for the record's own constellation and is never shared
    across constellations.

    Attributes
    ----------
    system : SatelliteSystem
        Constellation the message belongs to
    prn : int
        Satellite number within the constellation
    toc : GNSSTime
        Time of clock, in the constellation's native time scale
    data : tuple[float, ...]
        Parameter block, always NAV_DATA_SIZE long (zero padded)

    Notes
    -----
    Records are immutable. The caller is responsible for expressing any
    epoch passed to the orbit/clock routines in the same time scale as toc.
    """
    system: SatelliteSystem
    prn: int
    toc: GNSSTime
    data: tuple = ()

    def __post_init__(self):
        values = tuple(float(v) for v in self.data)
        if len(values) > NAV_DATA_SIZE:
            raise ValueError(f"Navigation data block has {len(values)} values, at most {NAV_DATA_SIZE} allowed")
        values += (0.0,) * (NAV_DATA_SIZE - len(values))
        object.__setattr__(self, 'system', SatelliteSystem(self.system))
        object.__setattr__(self, 'prn', int(self.prn))
        object.__setattr__(self, 'data', values)

    @classmethod
    def from_fields(cls, system, prn: int, toc: GNSSTime, values: dict) -> 'NavigationRecord':
        """Build a record from named parameters; missing ones are zero.

        Raises
        ------
        KeyError
            If a name is not defined for the constellation
        """
        system = SatelliteSystem(system)
        table = FIELD_TABLES[system]
        data = [0.0] * NAV_DATA_SIZE
        for name, value in values.items():
            if name not in table:
                raise KeyError(f"{system.name} navigation record has no field {name!r}")
            data[table[name]] = value
        return cls(system, prn, toc, tuple(data))

    @property
    def fields(self):
        """Name-to-slot table for this record's constellation"""
        return FIELD_TABLES[self.system]

    @property
    def time_sys(self) -> str:
        """Native time scale of this record"""
        return TIME_SYSTEMS[self.system]

    @property
    def sat_id(self) -> str:
        """Satellite identifier as written in RINEX 3, e.g. 'G05'"""
        return f"{self.system.char}{self.prn:02d}"

    def field(self, name: str) -> float:
        """Return the parameter stored under name.

        Raises
        ------
        KeyError
            If the record's constellation has no parameter with that name
        """
        try:
            index = self.fields[name]
        except KeyError:
            raise KeyError(f"{self.system.name} navigation record has no field {name!r}") from None
        return self.data[index]

    def has_field(self, name: str) -> bool:
        return name in self.fields

    def as_dict(self) -> dict:
        """All named parameters of this record"""
        return {name: self.data[i] for name, i in self.fields.items()}

    def __repr__(self):
        return f"NavigationRecord({self.sat_id}, toc={self.toc!r})"
