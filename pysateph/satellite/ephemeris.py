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

"""Broadcast record storage and selection"""

import logging
from collections.abc import Iterable
from typing import Optional

from ..core.data_structures import NavigationRecord, SatelliteSystem
from ..core.time import GNSSTime

logger = logging.getLogger(__name__)

# Validity period of a broadcast around its time of clock (s)
VALIDITY_PERIODS = {
    SatelliteSystem.GPS: 7200.0,       # 2 hours
    SatelliteSystem.QZSS: 7200.0,
    SatelliteSystem.GALILEO: 10800.0,  # 3 hours
    SatelliteSystem.BEIDOU: 21600.0,   # 6 hours
    SatelliteSystem.GLONASS: 1800.0,   # 30 minutes
}
DEFAULT_VALIDITY = 3600.0              # 1 hour

_HEALTH_FIELDS = {
    SatelliteSystem.BEIDOU: 'SatH1',
}


def validity_period(record: NavigationRecord) -> float:
    """
    Maximum distance between toc and the epoch of use (s).

    A GPS/QZSS record with a non-zero fit interval flag (hours) uses half
    of that interval instead of the system default.
    """
    if record.has_field('fit') and record.field('fit') > 0:
        return record.field('fit') * 3600.0 / 2.0
    return VALIDITY_PERIODS.get(record.system, DEFAULT_VALIDITY)


def is_healthy(record: NavigationRecord) -> bool:
    """True if the broadcast health flag is zero"""
    return record.field(_HEALTH_FIELDS.get(record.system, 'health')) == 0


def is_record_valid(record: NavigationRecord, epoch: GNSSTime) -> bool:
    """
    Check if a record may be used at epoch.

    Parameters
    ----------
    record : NavigationRecord
        Candidate broadcast
    epoch : GNSSTime
        Time of interest, in the record's time scale

    Returns
    -------
    bool
        True if the satellite is healthy and epoch lies within the
        validity period around toc
    """
    if not is_healthy(record):
        return False
    if epoch.time_sys != record.toc.time_sys:
        return False
    return abs(epoch - record.toc) <= validity_period(record)


def select_record(records: Iterable[NavigationRecord], system, prn: int,
                  epoch: GNSSTime) -> Optional[NavigationRecord]:
    """
    Select the best broadcast for a satellite at a given time.

    Parameters
    ----------
    records : iterable of NavigationRecord
        Candidate records, any satellites
    system : SatelliteSystem
        Constellation
    prn : int
        Satellite number
    epoch : GNSSTime
        Time of interest

    Returns
    -------
    NavigationRecord or None
        Valid record with toc closest to epoch, None if there is none
    """
    system = SatelliteSystem(system)
    best = None
    min_dt = float('inf')

    for record in records:
        if record.system != system or record.prn != prn:
            continue
        if not is_record_valid(record, epoch):
            continue

        dt = abs(epoch - record.toc)
        if dt < min_dt:
            min_dt = dt
            best = record

    return best


class EphemerisManager:
    """
    Manage broadcast record storage, selection, and maintenance.

    Records are kept per satellite, sorted by time of clock. A record with
    the same time of clock as a stored one supersedes it.

    Attributes
    ----------
    records : dict
        Maps (system, prn) to the list of records of that satellite
    max_age : float
        Maximum age of records kept by ``clean_old_records`` (s)

    Examples
    --------
    >>> manager = EphemerisManager()
    >>> manager.add_records(read_nav('brdc.rnx'))
    >>> record = manager.get_record(SatelliteSystem.GPS, 5, epoch)
    """

    def __init__(self, max_age: float = 7200.0):
        self.records = {}  # (system, prn) -> list of records
        self.max_age = max_age

    def add_record(self, record: NavigationRecord) -> None:
        """Add a record, replacing a stored one with the same time of clock"""
        key = (record.system, record.prn)
        stored = self.records.setdefault(key, [])

        for i, existing in enumerate(stored):
            if existing.toc == record.toc:
                logger.debug(f"{record.sat_id}: record at {record.toc} superseded")
                stored[i] = record
                return

        stored.append(record)
        stored.sort(key=lambda r: r.toc.to_seconds())

    def add_records(self, records: Iterable[NavigationRecord]) -> None:
        for record in records:
            self.add_record(record)

    def get_record(self, system, prn: int, epoch: GNSSTime) -> Optional[NavigationRecord]:
        """Best valid record of a satellite at epoch, or None"""
        system = SatelliteSystem(system)
        return select_record(self.records.get((system, prn), ()), system, prn, epoch)

    def satellites(self) -> list[tuple[SatelliteSystem, int]]:
        """Stored satellites as sorted (system, prn) pairs"""
        return sorted(self.records)

    def clean_old_records(self, epoch: GNSSTime) -> None:
        """
        Remove records whose time of clock is more than max_age before epoch.

        Satellites with no remaining records are removed. Records in another
        time scale than epoch are kept.
        """
        for key in list(self.records):
            self.records[key] = [
                r for r in self.records[key]
                if r.toc.time_sys != epoch.time_sys or epoch - r.toc < self.max_age
            ]

            if not self.records[key]:
                del self.records[key]

    def __len__(self):
        return sum(len(v) for v in self.records.values())
