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
RINEX 3 navigation file reader.

Each data block is one epoch line (system letter, PRN, time of clock and
the first three parameters) followed by continuation lines of four
parameters each, written in 19 character fields with an optional Fortran
``D`` exponent. Blocks are returned as ``NavigationRecord`` values with the
parameters in file order.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from ..core.data_structures import NAV_DATA_SIZE, TIME_SYSTEMS, NavigationRecord, SatelliteSystem
from ..core.errors import RinexFormatError
from ..core.time import GNSSTime

logger = logging.getLogger(__name__)

_FIELD_WIDTH = 19
_FIRST_LINE_START = 23
_CONT_LINE_START = 4
_LABEL_COLUMN = 60


def _parse_float(text: str) -> float:
    """Parse a RINEX number; blank fields are zero"""
    text = text.strip()
    if not text:
        return 0.0
    return float(text.replace('D', 'E').replace('d', 'e'))


def _split_fields(line: str, start: int, count: int) -> list[float]:
    values = []
    for i in range(count):
        pos = start + i * _FIELD_WIDTH
        values.append(_parse_float(line[pos:pos + _FIELD_WIDTH]))
    return values


def _is_continuation(line: str) -> bool:
    return line.startswith(' ') and bool(line.strip())


class RinexNavReader:
    """
    Sequential reader for RINEX 3.x navigation files.

    The header is parsed when the reader is created. Data blocks are then
    read one at a time with ``read_next``, or by iterating over the reader.

    Parameters
    ----------
    filename : str or Path
        Navigation file (mixed or single system)

    Attributes
    ----------
    version : float
        RINEX format version
    system : str
        Satellite system letter of the header ('M' for mixed)

    Raises
    ------
    RinexFormatError
        If the file is not a RINEX 3 navigation file
    FileNotFoundError
        If the file does not exist

    Examples
    --------
    >>> with RinexNavReader('BRDC00IGS_R_20240010000_01D_MN.rnx') as reader:
    ...     for record in reader:
    ...         print(record.sat_id, record.toc)
    """

    def __init__(self, filename: Union[str, Path]):
        self.filename = Path(filename)
        self.version = 0.0
        self.system = ''
        self._file = open(self.filename, 'r', encoding='ascii', errors='replace')
        try:
            self._read_header()
        except Exception:
            self._file.close()
            raise
        self._data_start = self._file.tell()

    def _read_header(self) -> None:
        first = self._file.readline()
        if 'RINEX VERSION / TYPE' not in first[_LABEL_COLUMN:]:
            raise RinexFormatError(f"{self.filename}: missing RINEX VERSION / TYPE header line")

        try:
            self.version = float(first[:9])
        except ValueError:
            raise RinexFormatError(f"{self.filename}: cannot parse RINEX version {first[:9]!r}") from None
        if not 3.0 <= self.version < 4.0:
            raise RinexFormatError(f"{self.filename}: RINEX version {self.version} not supported, 3.x required")

        file_type = first[20:21]
        if file_type != 'N':
            raise RinexFormatError(f"{self.filename}: file type {file_type!r} is not navigation data")
        self.system = first[40:41].strip() or 'G'

        while True:
            line = self._file.readline()
            if not line:
                raise RinexFormatError(f"{self.filename}: END OF HEADER not found")
            if 'END OF HEADER' in line[_LABEL_COLUMN:]:
                break

        logger.debug(f"Opened {self.filename}: RINEX {self.version:.2f}, system {self.system}")

    def _next_data_line(self) -> Optional[str]:
        """Next non-blank line, None at end of file"""
        while True:
            line = self._file.readline()
            if not line:
                return None
            if line.strip():
                return line.rstrip('\r\n')

    def _read_continuations(self) -> list[str]:
        lines = []
        while True:
            pos = self._file.tell()
            line = self._file.readline()
            if not _is_continuation(line):
                self._file.seek(pos)
                return lines
            lines.append(line.rstrip('\r\n'))

    def _parse_block(self, system: SatelliteSystem, line: str, continuations: list[str]) -> NavigationRecord:
        try:
            prn = int(line[1:3])
            epoch = datetime(int(line[4:8]), int(line[9:11]), int(line[12:14]),
                             int(line[15:17]), int(line[18:20]), int(line[21:23]))
            data = _split_fields(line, _FIRST_LINE_START, 3)
            for cont in continuations:
                data.extend(_split_fields(cont, _CONT_LINE_START, 4))
        except ValueError as e:
            raise RinexFormatError(f"{self.filename}: malformed navigation block {line!r}: {e}") from None

        # Trailing empty fields of the last line
        while len(data) > NAV_DATA_SIZE and data[-1] == 0.0:
            data.pop()
        if len(data) > NAV_DATA_SIZE:
            raise RinexFormatError(
                f"{self.filename}: navigation block {line[:3]!r} has {len(data)} values")

        toc = GNSSTime.from_datetime(epoch, TIME_SYSTEMS[system])
        return NavigationRecord(system, prn, toc, tuple(data))

    def read_next(self) -> Optional[NavigationRecord]:
        """
        Read the next navigation block.

        Blocks of systems without a broadcast orbit model in this library
        are skipped with a warning.

        Returns
        -------
        NavigationRecord or None
            Next record, None at end of data

        Raises
        ------
        RinexFormatError
            If a block cannot be parsed
        """
        while True:
            line = self._next_data_line()
            if line is None:
                return None

            if line.startswith(' '):
                logger.warning(f"{self.filename}: continuation line without epoch line skipped")
                continue

            continuations = self._read_continuations()
            try:
                system = SatelliteSystem.from_char(line[0])
            except ValueError:
                logger.warning(f"{self.filename}: unknown satellite system {line[0]!r}, block skipped")
                continue

            return self._parse_block(system, line, continuations)

    def peek_system(self) -> Optional[SatelliteSystem]:
        """System of the next block without consuming it, None at end of data
        or for an unknown system letter"""
        pos = self._file.tell()
        try:
            line = self._next_data_line()
        finally:
            self._file.seek(pos)
        if line is None:
            return None
        try:
            return SatelliteSystem.from_char(line[0])
        except ValueError:
            return None

    def skip_next(self) -> bool:
        """Skip the next block; False if there was none"""
        line = self._next_data_line()
        if line is None:
            return False
        self._read_continuations()
        return True

    def rewind(self) -> None:
        """Go back to the first data block"""
        self._file.seek(self._data_start)

    def close(self) -> None:
        self._file.close()

    def __iter__(self):
        return self

    def __next__(self) -> NavigationRecord:
        record = self.read_next()
        if record is None:
            raise StopIteration
        return record

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def read_nav(filename: Union[str, Path]) -> list[NavigationRecord]:
    """Read all navigation records of a RINEX 3 file"""
    with RinexNavReader(filename) as reader:
        records = list(reader)
    logger.info(f"Read {len(records)} navigation records from {filename}")
    return records
