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

"""Satellite states for many satellites and epochs"""

import logging
from collections.abc import Iterable
from typing import Optional, Union

import numpy as np
import pandas as pd

from ..config import NavConfig
from ..core.data_structures import NavigationRecord
from ..core.errors import InvalidInputError, NonConvergenceError
from ..core.time import GNSSTime
from .ephemeris import EphemerisManager
from .propagator import compute_satellite_state

logger = logging.getLogger(__name__)

COLUMNS = ['time', 'sys', 'prn', 'x', 'y', 'z', 'dts', 'status']

STATUS_OK = 'ok'
STATUS_NONCONVERGENCE = 'nonconvergence'
STATUS_INVALID = 'invalid'
STATUS_NO_EPHEMERIS = 'no_ephemeris'


def compute_states(records: Union[EphemerisManager, Iterable[NavigationRecord]],
                   epochs: Iterable[GNSSTime],
                   config: Optional[NavConfig] = None) -> pd.DataFrame:
    """
    Compute position and clock bias of every satellite at every epoch.

    Parameters
    ----------
    records : EphemerisManager or iterable of NavigationRecord
        Available broadcasts; the best one per satellite and epoch is used
    epochs : iterable of GNSSTime
        Evaluation epochs. A satellite is only evaluated at epochs in its
        own time scale; other epochs report ``no_ephemeris``.
    config : NavConfig, optional
        Solver settings

    Returns
    -------
    pd.DataFrame
        One row per (epoch, satellite) with columns
        time, sys, prn, x, y, z, dts, status.
        ``time`` is the calendar epoch, ``sys`` the RINEX system letter,
        x/y/z the ECEF position (m) and dts the clock bias (s). Rows whose
        status is not ``ok`` carry NaN state.

    Notes
    -----
    Each pair is computed independently: a Kepler solver failure or a
    rejected record only affects its own row.
    """
    if config is None:
        config = NavConfig()

    if isinstance(records, EphemerisManager):
        manager = records
    else:
        manager = EphemerisManager()
        manager.add_records(records)

    rows = []
    for epoch in epochs:
        for system, prn in manager.satellites():
            row = {
                'time': epoch.to_datetime(),
                'sys': system.char,
                'prn': prn,
                'x': np.nan, 'y': np.nan, 'z': np.nan,
                'dts': np.nan,
                'status': STATUS_OK,
            }

            record = manager.get_record(system, prn, epoch)
            if record is None:
                row['status'] = STATUS_NO_EPHEMERIS
                rows.append(row)
                continue

            try:
                rs, dts = compute_satellite_state(record, epoch, config)
            except NonConvergenceError as e:
                logger.warning(f"{record.sat_id} at {epoch}: {e}")
                row['status'] = STATUS_NONCONVERGENCE
            except InvalidInputError as e:
                logger.warning(f"{record.sat_id} at {epoch}: {e}")
                row['status'] = STATUS_INVALID
            else:
                row['x'], row['y'], row['z'] = rs
                row['dts'] = dts
            rows.append(row)

    return pd.DataFrame(rows, columns=COLUMNS)
